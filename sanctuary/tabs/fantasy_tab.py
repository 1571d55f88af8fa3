import streamlit as st
from pydantic import ValidationError

from sanctuary.constants import FANTASY_CATEGORIES, FANTASY_INTENSITY_LABELS
from sanctuary.data import repositories
from sanctuary.state import session_slices
from sanctuary.tabs.widgets import confirm_delete, section_title, tag_pills, validation_message

SLICE = "fantasy"
CATEGORY_LABELS = {value: f"{icon} {label}" for value, label, icon in FANTASY_CATEGORIES}


def _render_form(sync, identity):
    with st.expander("✨ Share a new fantasy", expanded=False):
        with st.form("fantasy.form", clear_on_submit=True):
            title = st.text_input("Title")
            description = st.text_area("Description", height=120)
            cols = st.columns(2)
            with cols[0]:
                category = st.selectbox(
                    "Category",
                    list(CATEGORY_LABELS),
                    format_func=CATEGORY_LABELS.get,
                )
            with cols[1]:
                intensity = st.select_slider(
                    "Intensity",
                    options=list(FANTASY_INTENSITY_LABELS),
                    format_func=FANTASY_INTENSITY_LABELS.get,
                )
            tags = st.text_input("Tags", placeholder="candles, weekend, surprise")
            is_private = st.checkbox("Keep private for now")
            submitted = st.form_submit_button("Save Fantasy", type="primary")

    if not submitted:
        return
    try:
        saved = repositories.save_fantasy(
            sync,
            identity,
            {
                "title": title,
                "description": description,
                "category": category,
                "intensity": intensity,
                "tags": tags,
                "is_private": is_private,
            },
        )
    except ValidationError as exc:
        st.error(validation_message(exc))
        return
    if saved:
        st.rerun()
    st.error("Could not save the fantasy.")


def render_fantasy_tab(ctx):
    sync = session_slices.get_or_create(SLICE, "sync", lambda: repositories.fantasies_sync(ctx.backend))
    sync.ensure_loaded()

    section_title("Fantasy Journal")
    _render_form(sync, ctx.identity)

    category = st.segmented_control(
        "Filter",
        ["all"] + list(CATEGORY_LABELS),
        format_func=lambda value: "All" if value == "all" else CATEGORY_LABELS[value],
        default="all",
        key="fantasy.filter",
    ) or "all"
    rows = repositories.filter_fantasies(sync.rows, category)

    if not rows:
        st.caption("No fantasies here yet.")
        return

    for row in rows:
        with st.container(border=True):
            cols = st.columns([7, 1])
            with cols[0]:
                lock = " 🔒" if row.get("is_private") else ""
                st.markdown(f"**{row.get('title')}**{lock}")
                st.caption(
                    f"{CATEGORY_LABELS.get(row.get('category'), row.get('category'))} • "
                    f"{FANTASY_INTENSITY_LABELS.get(row.get('intensity'), row.get('intensity'))}"
                )
                st.write(row.get("description") or "")
                tag_pills(row.get("tags"))
            with cols[1]:
                if row.get("created_by") == ctx.identity.id:
                    confirm_delete(sync, row["id"], "fantasy")
