import time

import streamlit as st

from sanctuary.state import session_slices
from sanctuary.tabs.widgets import section_title
from sanctuary.toys import CONNECTED, PRESET_PATTERNS, TOY_TYPES, ToySimulator, battery_color

SLICE = "toys"
PAIRING_SECONDS = 1.5
TYPE_LABELS = {value: f"{icon} {label}" for value, label, icon in TOY_TYPES}


def _render_toy_list(simulator):
    for toy in simulator.toys:
        with st.container(border=True):
            cols = st.columns([4, 2, 2])
            with cols[0]:
                selected = " ✅" if toy.id == simulator.active_toy_id else ""
                st.markdown(f"**{toy.name}**{selected}")
                st.caption(f"{TYPE_LABELS.get(toy.type, toy.type)} • {toy.connection_status}")
            with cols[1]:
                st.markdown(f"🔋 :{battery_color(toy.battery_level)}[{toy.battery_level}%]")
            with cols[2]:
                if toy.connection_status == CONNECTED:
                    if st.button("Select", key=f"toys.select.{toy.id}", disabled=simulator.is_playing):
                        simulator.select_toy(toy.id)
                        st.rerun()
                elif st.button("Connect", key=f"toys.connect.{toy.id}"):
                    simulator.begin_pairing(toy.id)
                    with st.spinner(f"Pairing {toy.name}…"):
                        time.sleep(PAIRING_SECONDS)
                    simulator.finish_pairing(toy.id)
                    st.rerun()


def _render_controls(simulator, ctx):
    toy = simulator.active_toy
    if toy is None:
        st.caption("Select a connected toy to start.")
        return

    st.markdown(f"**Controlling {toy.name}**")
    intensity = st.slider("Intensity", 0, 100, simulator.custom_intensity, key="toys.intensity")
    if intensity != simulator.custom_intensity:
        simulator.update_intensity(intensity)

    st.markdown("<div class='small-label'>Patterns</div>", unsafe_allow_html=True)
    cols = st.columns(len(PRESET_PATTERNS))
    for col, pattern in zip(cols, PRESET_PATTERNS):
        with col:
            active = simulator.current_pattern is not None and simulator.current_pattern.id == pattern.id
            if st.button(pattern.name, key=f"toys.pattern.{pattern.id}", type="primary" if active else "secondary"):
                simulator.select_pattern(pattern)
                st.rerun()
            st.caption(f"{pattern.description} ({pattern.duration}s)")

    if not simulator.is_playing:
        simulator.mood_before = st.slider("Mood before", 1, 10, simulator.mood_before, key="toys.mood_before")
        if st.button("▶️ Start Session", type="primary", key="toys.start"):
            simulator.start()
            st.rerun()
        return

    simulator.notes = st.text_area("Session notes", value=simulator.notes, key="toys.notes")
    if st.button("⏹️ Stop Session", type="primary", key="toys.stop"):
        record = simulator.stop(ctx.backend, ctx.identity.id)
        if record:
            st.toast(f"Session saved: {record['duration']}")
        st.rerun()


def render_toys_tab(ctx):
    simulator = session_slices.get_or_create(SLICE, "simulator", ToySimulator)

    section_title("Toy Control")
    st.caption("Simulated devices. Nothing here connects to real hardware.")
    left, right = st.columns([1, 1.4])
    with left:
        _render_toy_list(simulator)
    with right:
        _render_controls(simulator, ctx)
