import streamlit as st

from sanctuary.constants import STORY_CATEGORIES, STORY_INTENSITY_LABELS
from sanctuary.data import repositories
from sanctuary.state import session_slices
from sanctuary.tabs.widgets import section_title, tag_pills

SLICE = "stories"
CATEGORY_LABELS = {value: f"{icon} {label}" for value, label, icon in STORY_CATEGORIES}


def _render_reader(sync, story_id):
    story = sync.find(story_id)
    if story is None:
        session_slices.pop_value(SLICE, "reading_id")
        return False
    if st.button("← Back to library", key="stories.back"):
        session_slices.pop_value(SLICE, "reading_id")
        sync.refresh()
        st.rerun()
    st.markdown(f"## {story.get('title')}")
    st.caption(
        f"{CATEGORY_LABELS.get(story.get('category'), story.get('category'))} • "
        f"{story.get('reading_time') or '?'} min read • {story.get('source') or 'Unknown source'}"
    )
    tag_pills(story.get("tags"))
    st.markdown(story.get("content") or "")
    return True


def render_stories_tab(ctx):
    sync = session_slices.get_or_create(SLICE, "sync", lambda: repositories.stories_sync(ctx.backend))
    sync.ensure_loaded()

    reading_id = session_slices.get_value(SLICE, "reading_id")
    if reading_id and _render_reader(sync, reading_id):
        return

    section_title("Story Library")
    cols = st.columns([3, 2, 2, 1.4])
    with cols[0]:
        search = st.text_input("Search", key="stories.search", placeholder="Title or tag")
    with cols[1]:
        category = st.selectbox(
            "Category",
            ["all"] + list(CATEGORY_LABELS),
            format_func=lambda value: "All categories" if value == "all" else CATEGORY_LABELS[value],
            key="stories.category",
        )
    with cols[2]:
        intensity = st.selectbox(
            "Intensity",
            ["all"] + [str(level) for level in STORY_INTENSITY_LABELS],
            format_func=lambda value: "Any intensity" if value == "all" else STORY_INTENSITY_LABELS[int(value)],
            key="stories.intensity",
        )
    with cols[3]:
        favorites_only = st.toggle("Favorites", key="stories.favorites_only")

    stories = repositories.filter_stories(sync.rows, search, category, intensity, favorites_only)
    if not stories:
        st.caption("No stories match your filters.")
        return

    for story in stories:
        with st.container(border=True):
            head = st.columns([6, 1, 1])
            with head[0]:
                st.markdown(f"**{story.get('title')}**")
                st.caption(
                    f"{CATEGORY_LABELS.get(story.get('category'), story.get('category'))} • "
                    f"{STORY_INTENSITY_LABELS.get(story.get('intensity'), story.get('intensity'))} • "
                    f"{story.get('reading_time') or '?'}min • {story.get('read_count') or 0} reads"
                )
                tag_pills(story.get("tags"))
            with head[1]:
                heart = "❤️" if story.get("is_favorite") else "🤍"
                if st.button(heart, key=f"stories.fav.{story['id']}"):
                    repositories.toggle_favorite(sync, story["id"])
                    st.rerun()
            with head[2]:
                if st.button("Read", key=f"stories.read.{story['id']}"):
                    session_slices.set_value(SLICE, "reading_id", story["id"])
                    repositories.increment_read_count(ctx.backend, story["id"])
                    st.rerun()
