import html

import streamlit as st
from pydantic import ValidationError


def section_title(text):
    st.markdown(f"<div class='section-title'>{html.escape(text)}</div>", unsafe_allow_html=True)


def tag_pills(tags):
    if not tags:
        return
    pills = "".join(f"<span class='tag-pill'>#{html.escape(str(tag))}</span>" for tag in tags)
    st.markdown(pills, unsafe_allow_html=True)


def validation_message(exc: ValidationError):
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ()))
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


def confirm_delete(sync, row_id, key, prompt="Are you sure you want to delete this?"):
    """Two-step delete button. Returns True once the row is gone."""
    pending_key = f"{key}.pending_delete"
    if st.session_state.get(pending_key) != row_id:
        if st.button("🗑️", key=f"{key}.delete.{row_id}", help="Delete"):
            st.session_state[pending_key] = row_id
            st.rerun()
        return False

    st.warning(prompt)
    yes_col, no_col = st.columns(2)
    answer = None
    if yes_col.button("Delete", key=f"{key}.confirm.{row_id}", type="primary"):
        answer = True
    if no_col.button("Cancel", key=f"{key}.cancel.{row_id}"):
        answer = False
    if answer is None:
        return False

    st.session_state.pop(pending_key, None)
    deleted = sync.delete(row_id, confirm=lambda: answer)
    if answer and not deleted:
        st.error("Could not delete. Please try again.")
        return False
    st.rerun()
    return deleted
