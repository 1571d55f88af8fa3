from datetime import date, datetime, time

import streamlit as st
from pydantic import ValidationError

from sanctuary.constants import APPOINTMENT_TYPE_LABELS, APPOINTMENT_TYPES
from sanctuary.data import repositories
from sanctuary.state import session_slices
from sanctuary.tabs.widgets import confirm_delete, section_title, validation_message

SLICE = "appointments"


def _as_date(value):
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except (TypeError, ValueError):
        return date.today()


def _as_time(value):
    if isinstance(value, time):
        return value
    try:
        return time.fromisoformat(str(value))
    except (TypeError, ValueError):
        return datetime.now().time().replace(second=0, microsecond=0)


def _render_form(sync, identity):
    editing_id = session_slices.get_value(SLICE, "editing_id")
    editing = sync.find(editing_id) if editing_id else None
    values = repositories.appointment_form_values(editing or {})
    type_values = [value for value, _, _ in APPOINTMENT_TYPES]

    form_key = f"appointments.form.{editing_id or 'new'}"
    with st.form(form_key, clear_on_submit=True):
        st.markdown("**Edit Appointment**" if editing else "**New Appointment**")
        title = st.text_input("Title", value=values["title"])
        cols = st.columns(2)
        with cols[0]:
            day = st.date_input("Date", value=_as_date(values["date"]))
        with cols[1]:
            at = st.time_input("Time", value=_as_time(values["time"]))
        appointment_type = st.selectbox(
            "Type",
            type_values,
            index=type_values.index(values["type"]) if values["type"] in type_values else 0,
            format_func=lambda value: APPOINTMENT_TYPE_LABELS.get(value, value),
        )
        notes = st.text_area("Notes", value=values["notes"], height=80)
        submit_cols = st.columns(2)
        submitted = submit_cols[0].form_submit_button("Update" if editing else "Schedule", type="primary")
        cancelled = submit_cols[1].form_submit_button("Cancel") if editing else False

    if cancelled:
        session_slices.pop_value(SLICE, "editing_id")
        st.rerun()
    if not submitted:
        return

    try:
        saved = repositories.save_appointment(
            sync,
            identity,
            {"title": title, "date": day, "time": at, "type": appointment_type, "notes": notes},
            editing_id=editing["id"] if editing else None,
        )
    except ValidationError as exc:
        st.error(validation_message(exc))
        return
    if not saved:
        st.error("Could not save the appointment.")
        return
    session_slices.pop_value(SLICE, "editing_id")
    st.rerun()


def render_appointments_tab(ctx):
    sync = session_slices.get_or_create(SLICE, "sync", lambda: repositories.appointments_sync(ctx.backend))
    sync.ensure_loaded()

    section_title("Appointments")
    _render_form(sync, ctx.identity)

    if not sync.rows:
        st.caption("No appointments yet. Schedule your first special moment.")
        return

    for row in sync.rows:
        with st.container(border=True):
            cols = st.columns([6, 1, 1])
            with cols[0]:
                st.markdown(f"**{row.get('title') or 'Untitled'}**")
                st.caption(
                    f"{APPOINTMENT_TYPE_LABELS.get(row.get('type'), row.get('type'))} • "
                    f"{row.get('date')} at {row.get('time')}"
                )
                if row.get("notes"):
                    st.write(row["notes"])
            with cols[1]:
                if st.button("✏️", key=f"appointments.edit.{row['id']}", help="Edit"):
                    session_slices.set_value(SLICE, "editing_id", row["id"])
                    st.rerun()
            with cols[2]:
                confirm_delete(sync, row["id"], "appointments")
