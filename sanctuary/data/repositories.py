import copy
import logging
import random
from datetime import date, timedelta

from sanctuary.constants import (
    AI_CONVERSATIONS_TABLE,
    APPOINTMENTS_TABLE,
    DEFAULT_PREFERENCES,
    FANTASIES_TABLE,
    MOOD_LOGS_TABLE,
    PROFILES_TABLE,
    READ_COUNT_RPC,
    STORIES_TABLE,
)
from sanctuary.data.backend import BackendError, utc_now_iso
from sanctuary.data.models import AppointmentForm, ConversationForm, FantasyForm, MoodLogForm, ProfileForm
from sanctuary.data.sync import TableSync
from sanctuary.responder import generate_response

logger = logging.getLogger(__name__)


# --- per-screen syncs ---

def appointments_sync(backend):
    return TableSync(backend, APPOINTMENTS_TABLE, order_by="date", ascending=True)


def fantasies_sync(backend):
    return TableSync(backend, FANTASIES_TABLE, order_by="created_at", ascending=False)


def stories_sync(backend):
    return TableSync(backend, STORIES_TABLE, order_by="created_at", ascending=False)


def conversations_sync(backend, identity):
    return TableSync(
        backend,
        AI_CONVERSATIONS_TABLE,
        order_by="created_at",
        ascending=True,
        scope={"user_id": identity.id},
    )


# --- appointments ---

def save_appointment(sync, identity, form_values, editing_id=None):
    form = AppointmentForm(**form_values)
    row = form.to_row()
    if editing_id:
        row["updated_at"] = utc_now_iso()
        return sync.update(editing_id, row)
    row["created_by"] = identity.id
    return sync.create(row) is not None


def appointment_form_values(row):
    return {
        "title": row.get("title") or "",
        "date": row.get("date"),
        "time": row.get("time"),
        "type": row.get("type") or "shave",
        "notes": row.get("notes") or "",
    }


# --- fantasies ---

def save_fantasy(sync, identity, form_values):
    form = FantasyForm(**form_values)
    row = form.to_row()
    row["created_by"] = identity.id
    return sync.create(row) is not None


def filter_fantasies(rows, category="all"):
    if category == "all":
        return list(rows)
    return [row for row in rows if row.get("category") == category]


# --- stories ---

def filter_stories(rows, search="", category="all", intensity="all", favorites_only=False):
    term = str(search or "").strip().lower()
    result = []
    for story in rows:
        title = str(story.get("title") or "").lower()
        tags = [str(tag).lower() for tag in story.get("tags") or []]
        if term and term not in title and not any(term in tag for tag in tags):
            continue
        if category != "all" and story.get("category") != category:
            continue
        if intensity != "all" and str(story.get("intensity")) != str(intensity):
            continue
        if favorites_only and not story.get("is_favorite"):
            continue
        result.append(story)
    return result


def toggle_favorite(sync, story_id):
    story = sync.find(story_id)
    if story is None:
        return False
    flipped = not bool(story.get("is_favorite"))
    try:
        sync.backend.update(STORIES_TABLE, {"is_favorite": flipped}, {"id": story_id})
    except BackendError:
        logger.exception("Error updating favorite")
        return False
    sync.rows = [{**row, "is_favorite": flipped} if row.get("id") == story_id else row for row in sync.rows]
    return True


def increment_read_count(backend, story_id):
    try:
        backend.rpc(READ_COUNT_RPC, {"story_id": story_id})
    except BackendError:
        logger.exception("Error incrementing read count")
        return False
    return True


# --- companion ---

def send_companion_message(sync, identity, message, conversation_type="general", mood_tag=None, rng=None):
    form = ConversationForm(user_message=message, conversation_type=conversation_type, mood_tag=mood_tag)
    response = generate_response(form.user_message, form.conversation_type, rng or random.Random())
    return sync.create(
        {
            "user_id": identity.id,
            "conversation_type": form.conversation_type,
            "user_message": form.user_message,
            "ai_response": response,
            "mood_tag": form.mood_tag,
        },
        splice=True,
    )


# --- profile ---

def default_profile(identity):
    return {
        "id": identity.id,
        "role": identity.role,
        "display_name": identity.default_display_name,
        "preferences": copy.deepcopy(DEFAULT_PREFERENCES),
        "privacy_settings": {},
    }


def fetch_profile(backend, identity):
    try:
        profile = backend.select_one(PROFILES_TABLE, {"id": identity.id})
    except BackendError:
        logger.exception("Error fetching profile")
        return None
    if profile:
        return profile
    return create_profile(backend, identity)


def create_profile(backend, identity):
    try:
        created = backend.insert(PROFILES_TABLE, [default_profile(identity)])
    except BackendError:
        logger.exception("Error creating profile")
        return None
    return created[0] if created else None


def merged_preferences(profile):
    preferences = copy.deepcopy(DEFAULT_PREFERENCES)
    stored = (profile or {}).get("preferences") or {}
    for section, values in stored.items():
        if isinstance(values, dict) and isinstance(preferences.get(section), dict):
            preferences[section].update(values)
        else:
            preferences[section] = values
    return preferences


def save_profile(backend, identity, display_name, preferences):
    form = ProfileForm(display_name=display_name, preferences=preferences)
    try:
        backend.update(
            PROFILES_TABLE,
            {"display_name": form.display_name, "preferences": form.preferences, "updated_at": utc_now_iso()},
            {"id": identity.id},
        )
    except BackendError:
        logger.exception("Error saving profile")
        return None
    return fetch_profile(backend, identity)


# --- mood logs ---

def default_mood(day=None):
    return {
        "date": (day or date.today()).isoformat(),
        "overall_mood": 5,
        "intimacy_mood": 5,
        "energy_level": 5,
        "connection_feeling": 5,
        "notes": "",
    }


def fetch_mood_log(backend, identity, day=None):
    mood = default_mood(day)
    try:
        row = backend.select_one(MOOD_LOGS_TABLE, {"user_id": identity.id, "date": mood["date"]})
    except BackendError:
        logger.exception("Error fetching mood")
        return mood
    if row:
        for key in mood:
            if row.get(key) is not None:
                mood[key] = row[key]
    return mood


def save_mood_log(backend, identity, mood_values):
    form = MoodLogForm(**mood_values)
    try:
        saved = backend.upsert(
            MOOD_LOGS_TABLE,
            [{"user_id": identity.id, **form.to_row()}],
            on_conflict=["user_id", "date"],
        )
    except BackendError:
        logger.exception("Error saving mood log")
        return None
    return saved[0] if saved else None


def list_mood_history(backend, identity, days=30, today=None):
    start = (today or date.today()) - timedelta(days=days - 1)
    try:
        rows = backend.select(MOOD_LOGS_TABLE, filters={"user_id": identity.id}, order="date", ascending=True)
    except BackendError:
        logger.exception("Error fetching mood history")
        return []
    return [row for row in rows if str(row.get("date") or "") >= start.isoformat()]


def mood_emoji(value):
    value = int(value or 0)
    if value <= 2:
        return "😔"
    if value <= 4:
        return "😐"
    if value <= 6:
        return "🙂"
    if value <= 8:
        return "😊"
    return "😍"
