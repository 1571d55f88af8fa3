import html

import streamlit as st

from sanctuary.constants import QUICK_MESSAGES
from sanctuary.data.sync import ChatFeed
from sanctuary.state import session_slices
from sanctuary.tabs.widgets import section_title

SLICE = "chat"
DRAFT_KEY = "chat.draft"
PREFILL_KEY = "chat.prefill"


def _feed(ctx):
    feed = session_slices.get_or_create(SLICE, "feed", lambda: ChatFeed(ctx.backend, ctx.identity))
    feed.start()
    return feed


def _render_messages(feed):
    feed.pump()
    if not feed.rows:
        st.caption("No messages yet. Say something sweet.")
        return
    for row in feed.rows:
        own = feed.is_own(row)
        sender = "You" if own else str(row.get("sender_role") or "").replace("partner", "Partner ")
        content = html.escape(str(row.get("content") or ""))
        stamp = str(row.get("created_at") or "")[11:16]
        st.markdown(
            f"<div class='chat-bubble{' own' if own else ''}'>{content}"
            f"<div class='small-label'>{sender} • {stamp}</div></div>",
            unsafe_allow_html=True,
        )


def render_chat_tab(ctx):
    feed = _feed(ctx)
    section_title(f"Chat with {ctx.identity.partner_label}")

    @st.fragment(run_every=ctx.settings.chat_poll_seconds)
    def _live_messages():
        _render_messages(feed)

    with st.container(height=420):
        _live_messages()

    st.markdown("<div class='small-label'>Quick messages</div>", unsafe_allow_html=True)
    cols = st.columns(len(QUICK_MESSAGES))
    for idx, (col, text) in enumerate(zip(cols, QUICK_MESSAGES)):
        if col.button(text, key=f"chat.quick.{idx}", use_container_width=True):
            st.session_state[PREFILL_KEY] = text
            st.rerun()

    prefill = st.session_state.pop(PREFILL_KEY, None)
    if prefill is not None:
        st.session_state[DRAFT_KEY] = prefill

    with st.form("chat.form", clear_on_submit=True):
        draft = st.text_input("Message", key=DRAFT_KEY, placeholder="Type a message…")
        sent = st.form_submit_button("Send 💕", type="primary")
    if sent and str(draft or "").strip():
        if not feed.send(draft):
            st.warning("Message not sent.")
        else:
            st.rerun()
