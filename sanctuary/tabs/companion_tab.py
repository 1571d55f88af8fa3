import html

import streamlit as st
from pydantic import ValidationError

from sanctuary.constants import CONVERSATION_TYPES, QUICK_PROMPTS
from sanctuary.data import repositories
from sanctuary.state import session_slices
from sanctuary.tabs.widgets import section_title, validation_message

SLICE = "companion"
TYPE_LABELS = dict(CONVERSATION_TYPES)
MOOD_TAGS = ["", "happy", "anxious", "sad", "loving", "confused", "hopeful"]


def _send(ctx, sync, message, conversation_type, mood_tag):
    try:
        created = repositories.send_companion_message(sync, ctx.identity, message, conversation_type, mood_tag)
    except ValidationError as exc:
        st.error(validation_message(exc))
        return
    if created is None:
        st.error("The companion could not answer right now.")
        return
    st.rerun()


def render_companion_tab(ctx):
    sync = session_slices.get_or_create(
        SLICE, "sync", lambda: repositories.conversations_sync(ctx.backend, ctx.identity)
    )
    sync.ensure_loaded()

    section_title("AI Companion")
    cols = st.columns(2)
    with cols[0]:
        conversation_type = st.selectbox(
            "Topic",
            list(TYPE_LABELS),
            format_func=TYPE_LABELS.get,
            key="companion.type",
        )
    with cols[1]:
        mood_tag = st.selectbox(
            "How are you feeling?",
            MOOD_TAGS,
            format_func=lambda value: value.title() if value else "Prefer not to say",
            key="companion.mood",
        )

    with st.container(height=380):
        if not sync.rows:
            st.caption("Ask anything about your relationship. Conversations stay private to you.")
        for row in sync.rows:
            st.markdown(
                f"<div class='chat-bubble own'>{html.escape(str(row.get('user_message') or ''))}</div>",
                unsafe_allow_html=True,
            )
            st.markdown(
                f"<div class='chat-bubble'>🤖 {html.escape(str(row.get('ai_response') or ''))}"
                f"<div class='small-label'>{TYPE_LABELS.get(row.get('conversation_type'), '')}</div></div>",
                unsafe_allow_html=True,
            )

    if not sync.rows:
        st.markdown("<div class='small-label'>Try asking</div>", unsafe_allow_html=True)
        prompt_cols = st.columns(2)
        for idx, prompt in enumerate(QUICK_PROMPTS):
            if prompt_cols[idx % 2].button(prompt, key=f"companion.prompt.{idx}", use_container_width=True):
                _send(ctx, sync, prompt, conversation_type, mood_tag)

    message = st.chat_input("Share what's on your mind…", key="companion.input")
    if message:
        _send(ctx, sync, message, conversation_type, mood_tag)
