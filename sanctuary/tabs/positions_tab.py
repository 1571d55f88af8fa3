import streamlit as st

from sanctuary.guide import DIFFICULTY_LABELS, GUIDE_CATEGORIES, filter_guide, guide_entries, toggle_guide_favorite
from sanctuary.state import session_slices
from sanctuary.tabs.widgets import section_title

SLICE = "positions"
CATEGORY_LABELS = {value: f"{icon} {label}" for value, label, icon in GUIDE_CATEGORIES}


def render_positions_tab(ctx):
    entries = session_slices.get_or_create(SLICE, "entries", guide_entries)

    section_title("Intimacy Guide")
    cols = st.columns([3, 2, 2])
    with cols[0]:
        search = st.text_input("Search", key="positions.search", placeholder="Search the guide")
    with cols[1]:
        category = st.selectbox(
            "Category",
            ["all"] + list(CATEGORY_LABELS),
            format_func=lambda value: "All categories" if value == "all" else CATEGORY_LABELS[value],
            key="positions.category",
        )
    with cols[2]:
        difficulty = st.selectbox(
            "Difficulty",
            ["all"] + list(DIFFICULTY_LABELS),
            format_func=lambda value: "Any level" if value == "all" else DIFFICULTY_LABELS[value],
            key="positions.difficulty",
        )

    visible = filter_guide(entries, search, category, difficulty)
    if not visible:
        st.caption("Nothing matches those filters.")
        return

    for entry in visible:
        with st.container(border=True):
            head = st.columns([6, 1])
            with head[0]:
                st.markdown(f"**{entry['name']}**")
                st.caption(
                    f"{CATEGORY_LABELS.get(entry['category'], entry['category'])} • "
                    f"{DIFFICULTY_LABELS.get(entry['difficulty'])}"
                )
            with head[1]:
                heart = "❤️" if entry["is_favorite"] else "🤍"
                if st.button(heart, key=f"positions.fav.{entry['id']}"):
                    session_slices.set_value(SLICE, "entries", toggle_guide_favorite(entries, entry["id"]))
                    st.rerun()
            st.write(entry["description"])
            body = st.columns(2)
            with body[0]:
                st.markdown("**Benefits**")
                for item in entry["benefits"]:
                    st.markdown(f"- {item}")
            with body[1]:
                st.markdown("**Tips**")
                for item in entry["tips"]:
                    st.markdown(f"- {item}")
