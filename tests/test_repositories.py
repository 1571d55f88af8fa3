import random
from datetime import date

import pytest
from pydantic import ValidationError

from sanctuary.constants import PROFILES_TABLE, STORIES_TABLE
from sanctuary.data import repositories
from sanctuary.data.backend import BackendError
from sanctuary.responder import RESPONSES

STORIES = [
    {"title": "Lake House", "content": "...", "category": "romantic", "intensity": 1, "tags": ["summer"]},
    {"title": "City Lights", "content": "...", "category": "adventure", "intensity": 3, "tags": ["travel", "night"]},
    {"title": "Rainy Sunday", "content": "...", "category": "romantic", "intensity": 3, "tags": ["cozy"],
     "is_favorite": True},
]


@pytest.fixture
def stories(backend):
    backend.insert(STORIES_TABLE, STORIES)
    sync = repositories.stories_sync(backend)
    sync.refresh()
    return sync


def test_appointment_create_then_edit(backend, identity):
    sync = repositories.appointments_sync(backend)
    values = {"title": "Massage night", "date": date(2024, 5, 1), "time": "20:30", "type": "massage", "notes": ""}
    assert repositories.save_appointment(sync, identity, values) is True

    row = sync.rows[0]
    assert row["created_by"] == identity.id
    assert row["date"] == "2024-05-01"
    assert row["time"] == "20:30"
    assert row["updated_at"] is None

    edited = {**repositories.appointment_form_values(row), "title": "Massage & movie"}
    assert repositories.save_appointment(sync, identity, edited, editing_id=row["id"]) is True
    assert len(sync.rows) == 1
    assert sync.rows[0]["title"] == "Massage & movie"
    assert sync.rows[0]["updated_at"]


def test_appointment_requires_title(backend, identity):
    sync = repositories.appointments_sync(backend)
    with pytest.raises(ValidationError):
        repositories.save_appointment(sync, identity, {"title": "  ", "date": "2024-05-01", "time": "20:00"})
    assert sync.rows == []


def test_fantasy_tags_are_split(backend, identity):
    sync = repositories.fantasies_sync(backend)
    saved = repositories.save_fantasy(
        sync,
        identity,
        {"title": "Picnic", "description": "Under the stars", "category": "romantic", "intensity": 2,
         "tags": " stars, , blanket ,wine"},
    )
    assert saved is True
    assert sync.rows[0]["tags"] == ["stars", "blanket", "wine"]
    assert sync.rows[0]["is_private"] is False


def test_fantasy_rejects_out_of_range_intensity(backend, identity):
    sync = repositories.fantasies_sync(backend)
    with pytest.raises(ValidationError):
        repositories.save_fantasy(sync, identity, {"title": "x", "description": "y", "intensity": 6})


def test_filter_fantasies_by_category():
    rows = [{"category": "romantic"}, {"category": "playful"}]
    assert repositories.filter_fantasies(rows, "all") == rows
    assert repositories.filter_fantasies(rows, "playful") == [{"category": "playful"}]


def test_story_filters_compose(stories):
    titles = lambda rows: sorted(row["title"] for row in rows)
    assert titles(repositories.filter_stories(stories.rows, search="NIGHT")) == ["City Lights"]
    assert titles(repositories.filter_stories(stories.rows, search="lake")) == ["Lake House"]
    assert titles(repositories.filter_stories(stories.rows, category="romantic", intensity="3")) == ["Rainy Sunday"]
    assert titles(repositories.filter_stories(stories.rows, intensity="3")) == ["City Lights", "Rainy Sunday"]
    assert titles(repositories.filter_stories(stories.rows, favorites_only=True)) == ["Rainy Sunday"]
    assert repositories.filter_stories(stories.rows, search="lake", favorites_only=True) == []


def test_toggle_favorite_flips_exactly_one_row(backend, stories):
    target = next(row for row in stories.rows if row["title"] == "Lake House")
    before = {row["id"]: row["is_favorite"] for row in stories.rows}

    assert repositories.toggle_favorite(stories, target["id"]) is True

    after = {row["id"]: row["is_favorite"] for row in stories.rows}
    changed = [row_id for row_id in before if before[row_id] != after[row_id]]
    assert changed == [target["id"]]
    assert backend.select_one(STORIES_TABLE, {"id": target["id"]})["is_favorite"] is True


def test_toggle_favorite_failure_leaves_local_state(backend, stories, monkeypatch):
    target = stories.rows[0]

    def broken_update(*args, **kwargs):
        raise BackendError("nope")

    monkeypatch.setattr(backend, "update", broken_update)
    assert repositories.toggle_favorite(stories, target["id"]) is False
    assert stories.find(target["id"])["is_favorite"] == target["is_favorite"]


def test_increment_read_count(backend, stories):
    story = stories.rows[0]
    assert repositories.increment_read_count(backend, story["id"]) is True
    assert backend.select_one(STORIES_TABLE, {"id": story["id"]})["read_count"] == 1


def test_companion_reply_is_spliced(backend, identity):
    sync = repositories.conversations_sync(backend, identity)
    sync.refresh()
    row = repositories.send_companion_message(
        sync, identity, "How do we keep dating?", "relationship", "", rng=random.Random(5)
    )
    assert row is not None
    assert sync.rows == [row]
    assert row["ai_response"] in RESPONSES["relationship"]
    assert row["mood_tag"] is None
    assert row["user_id"] == identity.id


def test_companion_history_is_scoped_to_user(backend, identity, partner):
    mine = repositories.conversations_sync(backend, identity)
    theirs = repositories.conversations_sync(backend, partner)
    repositories.send_companion_message(mine, identity, "hello", rng=random.Random(1))
    theirs.refresh()
    assert theirs.rows == []


def test_missing_profile_is_created_on_fetch(backend, identity):
    assert backend.select(PROFILES_TABLE) == []
    profile = repositories.fetch_profile(backend, identity)
    assert profile["id"] == identity.id
    assert profile["display_name"] == "alex"
    assert profile["role"] == "partner1"
    assert profile["preferences"]["interface"]["theme"] == "romantic"
    assert profile["privacy_settings"] == {}

    again = repositories.fetch_profile(backend, identity)
    assert again["id"] == profile["id"]
    assert len(backend.select(PROFILES_TABLE)) == 1


def test_save_profile_updates_then_refetches(backend, identity):
    repositories.fetch_profile(backend, identity)
    preferences = repositories.merged_preferences({"preferences": {"interface": {"theme": "nature"}}})
    saved = repositories.save_profile(backend, identity, " Alex ", preferences)
    assert saved["display_name"] == "Alex"
    assert saved["preferences"]["interface"] == {"theme": "nature", "intimacy_level": "moderate"}
    assert saved["updated_at"]


def test_mood_log_upserts_one_row_per_day(backend, identity):
    day = date(2024, 3, 1)
    first = repositories.save_mood_log(backend, identity, {"date": day, "overall_mood": 3})
    second = repositories.save_mood_log(backend, identity, {"date": day, "overall_mood": 8, "notes": "better"})
    assert first["id"] == second["id"]

    mood = repositories.fetch_mood_log(backend, identity, day)
    assert mood["overall_mood"] == 8
    assert mood["notes"] == "better"


def test_mood_log_defaults_when_missing(backend, identity):
    mood = repositories.fetch_mood_log(backend, identity, date(2024, 3, 2))
    assert mood == repositories.default_mood(date(2024, 3, 2))


def test_mood_history_window(backend, identity):
    today = date(2024, 3, 31)
    for day in (date(2024, 2, 1), date(2024, 3, 10), date(2024, 3, 31)):
        repositories.save_mood_log(backend, identity, {"date": day})
    history = repositories.list_mood_history(backend, identity, days=30, today=today)
    assert [row["date"] for row in history] == ["2024-03-10", "2024-03-31"]


@pytest.mark.parametrize("value,emoji", [(1, "😔"), (4, "😐"), (6, "🙂"), (8, "😊"), (10, "😍")])
def test_mood_emoji(value, emoji):
    assert repositories.mood_emoji(value) == emoji
