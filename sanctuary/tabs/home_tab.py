import streamlit as st

from sanctuary.tabs.widgets import section_title

QUICK_ACTIONS = [
    ("appointments", "📅", "Schedule Time"),
    ("chat", "💬", "Send Love Note"),
    ("ai", "🤖", "Ask the Companion"),
    ("fantasy", "✨", "Share a Fantasy"),
]

FEATURE_CARDS = [
    ("appointments", "📅", "Appointments", "Plan special moments together"),
    ("chat", "💬", "Private Chat", "Messages just for the two of you"),
    ("fantasy", "✨", "Fantasy Journal", "Share desires safely"),
    ("scenes", "🎭", "Scene Ideas", "Get inspired for date nights"),
    ("positions", "📖", "Intimacy Guide", "Learn and explore together"),
    ("stories", "📚", "Story Library", "Read romantic stories"),
    ("toys", "🎮", "Toy Control", "Simulated connected play"),
    ("ai", "🤖", "AI Companion", "Gentle relationship guidance"),
    ("profile", "👤", "Profile & Mood", "Track how you both feel"),
]


def render_home_tab(ctx):
    identity = ctx.identity
    section_title("Welcome to your private space")
    st.markdown(
        f"<div class='small-label'>You are {identity.role_label}; your partner is {identity.partner_label}.</div>",
        unsafe_allow_html=True,
    )

    st.markdown("<div class='small-label' style='margin-top:12px;'>Quick actions</div>", unsafe_allow_html=True)
    cols = st.columns(len(QUICK_ACTIONS))
    for col, (route_id, icon, label) in zip(cols, QUICK_ACTIONS):
        with col:
            if st.button(f"{icon} {label}", key=f"home.quick.{route_id}", use_container_width=True):
                ctx.navigate(route_id)

    st.markdown("<div class='small-label' style='margin-top:12px;'>Explore</div>", unsafe_allow_html=True)
    for start in range(0, len(FEATURE_CARDS), 3):
        cols = st.columns(3)
        for col, (route_id, icon, title, blurb) in zip(cols, FEATURE_CARDS[start:start + 3]):
            with col:
                st.markdown(
                    f"<div class='card'><div style='font-size:26px'>{icon}</div>"
                    f"<b>{title}</b><div class='small-label'>{blurb}</div></div>",
                    unsafe_allow_html=True,
                )
                if st.button("Open", key=f"home.card.{route_id}", use_container_width=True):
                    ctx.navigate(route_id)
