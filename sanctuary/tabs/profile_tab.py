from datetime import date

import streamlit as st
from pydantic import ValidationError

from sanctuary.constants import MOOD_FIELDS, THEMES
from sanctuary.data import repositories
from sanctuary.state import session_slices
from sanctuary.tabs.widgets import section_title, validation_message
from sanctuary.theme import set_theme
from sanctuary.visualizations import mood_averages, mood_history_chart, mood_history_frame

SLICE = "profile"
THEME_LABELS = dict(THEMES)
INTIMACY_LEVELS = ["gentle", "moderate", "adventurous"]


def _profile(ctx):
    profile = session_slices.get_value(SLICE, "profile")
    if profile is None:
        profile = repositories.fetch_profile(ctx.backend, ctx.identity)
        session_slices.set_value(SLICE, "profile", profile)
    return profile


def _render_profile_form(ctx, profile):
    preferences = repositories.merged_preferences(profile)
    notifications = preferences["notifications"]
    privacy = preferences["privacy"]
    interface = preferences["interface"]

    with st.form("profile.form"):
        display_name = st.text_input("Display name", value=profile.get("display_name") or "")
        st.caption(f"Role: {ctx.identity.role_label}")

        st.markdown("**Notifications**")
        notifications = {
            "appointments": st.toggle("Appointment reminders", value=bool(notifications.get("appointments"))),
            "messages": st.toggle("New messages", value=bool(notifications.get("messages"))),
            "mood_reminders": st.toggle("Daily mood reminder", value=bool(notifications.get("mood_reminders"))),
        }
        st.markdown("**Privacy**")
        privacy = {
            "share_mood_data": st.toggle("Share mood with partner", value=bool(privacy.get("share_mood_data"))),
            "ai_learning": st.toggle("Let the companion learn from chats", value=bool(privacy.get("ai_learning"))),
        }
        st.markdown("**Interface**")
        theme_values = list(THEME_LABELS)
        current_theme = interface.get("theme") if interface.get("theme") in theme_values else theme_values[0]
        current_level = interface.get("intimacy_level") if interface.get("intimacy_level") in INTIMACY_LEVELS else "moderate"
        interface = {
            "theme": st.selectbox(
                "Theme",
                theme_values,
                index=theme_values.index(current_theme),
                format_func=THEME_LABELS.get,
            ),
            "intimacy_level": st.selectbox(
                "Intimacy level",
                INTIMACY_LEVELS,
                index=INTIMACY_LEVELS.index(current_level),
                format_func=str.title,
            ),
        }
        submitted = st.form_submit_button("Save Profile", type="primary")

    if not submitted:
        return
    new_preferences = {"notifications": notifications, "privacy": privacy, "interface": interface}
    try:
        saved = repositories.save_profile(ctx.backend, ctx.identity, display_name, new_preferences)
    except ValidationError as exc:
        st.error(validation_message(exc))
        return
    if saved is None:
        st.error("Could not save your profile.")
        return
    session_slices.set_value(SLICE, "profile", saved)
    set_theme(interface["theme"])
    st.rerun()


def _render_mood(ctx):
    today = date.today()
    mood = repositories.fetch_mood_log(ctx.backend, ctx.identity, today)
    st.markdown(f"**How are you feeling today?** ({today.isoformat()})")
    with st.form("profile.mood"):
        values = {"date": today}
        for key, label in MOOD_FIELDS:
            values[key] = st.slider(label, 1, 10, int(mood.get(key) or 5))
        values["notes"] = st.text_area("Notes", value=mood.get("notes") or "", height=80)
        submitted = st.form_submit_button("Save Mood", type="primary")
    if not submitted:
        return
    try:
        saved = repositories.save_mood_log(ctx.backend, ctx.identity, values)
    except ValidationError as exc:
        st.error(validation_message(exc))
        return
    if saved is None:
        st.error("Could not save your mood.")
    else:
        st.success(f"Mood saved {repositories.mood_emoji(values['overall_mood'])}")


def _render_stats(ctx):
    frame = mood_history_frame(repositories.list_mood_history(ctx.backend, ctx.identity))
    if frame.empty:
        st.caption("Log your mood for a few days to see trends here.")
        return
    averages = mood_averages(frame)
    cols = st.columns(len(MOOD_FIELDS))
    for col, (key, label) in zip(cols, MOOD_FIELDS):
        col.metric(label, f"{averages[key]} {repositories.mood_emoji(averages[key])}")
    st.plotly_chart(mood_history_chart(frame), use_container_width=True)


def render_profile_tab(ctx):
    section_title("Profile")
    profile = _profile(ctx)
    if profile is None:
        st.error("Could not load your profile.")
        if st.button("Retry", key="profile.retry"):
            session_slices.pop_value(SLICE, "profile")
            st.rerun()
        return

    profile_tab, mood_tab, stats_tab = st.tabs(["👤 Profile", "😊 Mood", "📈 Stats"])
    with profile_tab:
        _render_profile_form(ctx, profile)
    with mood_tab:
        _render_mood(ctx)
    with stats_tab:
        _render_stats(ctx)
