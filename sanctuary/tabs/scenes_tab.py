import streamlit as st

from sanctuary.scenes import DEFAULT_PREFERENCES, PREFERENCE_KEYS, SCENE_MOODS, generate_scene
from sanctuary.state import session_slices
from sanctuary.tabs.widgets import section_title

SLICE = "scenes"
MOOD_LABELS = {value: f"{icon} {label}" for value, label, icon in SCENE_MOODS}


def _render_list(title, items):
    st.markdown(f"**{title}**")
    for item in items:
        st.markdown(f"- {item}")


def render_scenes_tab(ctx):
    section_title("Scene Ideas")
    st.caption("Pick a mood and tune the sliders, then generate an idea for tonight.")

    mood = st.radio(
        "Mood",
        list(MOOD_LABELS),
        format_func=MOOD_LABELS.get,
        horizontal=True,
        key="scenes.mood",
    )
    preferences = {}
    cols = st.columns(len(PREFERENCE_KEYS))
    for col, key in zip(cols, PREFERENCE_KEYS):
        with col:
            preferences[key] = st.slider(key.title(), 1, 5, DEFAULT_PREFERENCES[key], key=f"scenes.pref.{key}")

    if st.button("Generate Scene", type="primary", key="scenes.generate"):
        session_slices.set_value(SLICE, "scene", generate_scene(mood, preferences, ctx.identity.role))

    scene = session_slices.get_value(SLICE, "scene")
    if not scene:
        return

    with st.container(border=True):
        st.markdown(f"### {scene['title']}")
        st.caption(f"{scene['setting']} • {scene['duration']}")
        cols = st.columns(3)
        with cols[0]:
            _render_list("Activities", scene["activities"])
        with cols[1]:
            _render_list("Preparation", scene["preparation"])
        with cols[2]:
            _render_list("Special touches", scene["special_touches"])
        st.markdown(f"🎵 {scene['mood_music']}")
        st.caption(f"Customized for {scene['customized_for'].replace('partner', 'Partner ')}")
