from datetime import date

import pytest
from pydantic import ValidationError

from sanctuary.data.models import AppointmentForm, ConversationForm, MoodLogForm, parse_tags
from sanctuary.visualizations import mood_averages, mood_history_frame


def test_parse_tags():
    assert parse_tags("a, b ,,c") == ["a", "b", "c"]
    assert parse_tags(["x", " ", "y "]) == ["x", "y"]
    assert parse_tags(None) == []


def test_appointment_row_formats_date_and_time():
    form = AppointmentForm(title=" Spa ", date="2024-05-01", time="09:05:00", type="massage")
    assert form.to_row() == {"title": "Spa", "date": "2024-05-01", "time": "09:05", "type": "massage", "notes": ""}


def test_appointment_rejects_unknown_type():
    with pytest.raises(ValidationError):
        AppointmentForm(title="Spa", date="2024-05-01", time="09:00", type="dentist")


def test_conversation_requires_message():
    with pytest.raises(ValidationError):
        ConversationForm(user_message="   ")


@pytest.mark.parametrize("field", ["overall_mood", "intimacy_mood", "energy_level", "connection_feeling"])
def test_mood_ratings_are_bounded(field):
    with pytest.raises(ValidationError):
        MoodLogForm(date=date(2024, 1, 1), **{field: 11})
    with pytest.raises(ValidationError):
        MoodLogForm(date=date(2024, 1, 1), **{field: 0})


def test_mood_history_frame_sorts_and_averages():
    rows = [
        {"date": "2024-03-02", "overall_mood": 8, "intimacy_mood": 6, "energy_level": 4, "connection_feeling": 10},
        {"date": "2024-03-01", "overall_mood": 4, "intimacy_mood": 6, "energy_level": 6, "connection_feeling": 8},
    ]
    frame = mood_history_frame(rows)
    assert [value.day for value in frame["date"]] == [1, 2]
    assert mood_averages(frame) == {
        "overall_mood": 6.0,
        "intimacy_mood": 6.0,
        "energy_level": 5.0,
        "connection_feeling": 9.0,
    }


def test_empty_history():
    frame = mood_history_frame([])
    assert frame.empty
    assert mood_averages(frame)["overall_mood"] == 0.0
