from __future__ import annotations

import logging

from sqlalchemy import text as sql_text

from sanctuary.constants import (
    AI_CONVERSATIONS_TABLE,
    APPOINTMENTS_TABLE,
    FANTASIES_TABLE,
    MESSAGES_TABLE,
    MOOD_LOGS_TABLE,
    PROFILES_TABLE,
    STORIES_TABLE,
    TOY_SESSIONS_TABLE,
    USERS_TABLE,
)

logger = logging.getLogger(__name__)

TABLE_COLUMNS = {
    APPOINTMENTS_TABLE: [
        "id", "title", "date", "time", "type", "notes", "created_by", "created_at", "updated_at",
    ],
    FANTASIES_TABLE: [
        "id", "title", "description", "category", "intensity", "is_private", "tags", "created_by", "created_at",
    ],
    MESSAGES_TABLE: [
        "id", "content", "sender_id", "sender_role", "message_type", "media_url", "created_at",
    ],
    AI_CONVERSATIONS_TABLE: [
        "id", "user_id", "conversation_type", "user_message", "ai_response", "mood_tag", "created_at",
    ],
    STORIES_TABLE: [
        "id", "title", "content", "category", "tags", "reading_time", "intensity", "source",
        "is_favorite", "read_count", "created_at",
    ],
    TOY_SESSIONS_TABLE: [
        "id", "toy_name", "toy_type", "session_data", "duration", "session_notes", "mood_before",
        "created_by", "created_at",
    ],
    PROFILES_TABLE: [
        "id", "display_name", "avatar_url", "role", "preferences", "privacy_settings", "created_at", "updated_at",
    ],
    MOOD_LOGS_TABLE: [
        "id", "user_id", "date", "overall_mood", "intimacy_mood", "energy_level", "connection_feeling",
        "notes", "created_at",
    ],
}

JSON_COLUMNS = {
    FANTASIES_TABLE: {"tags"},
    STORIES_TABLE: {"tags"},
    TOY_SESSIONS_TABLE: {"session_data"},
    PROFILES_TABLE: {"preferences", "privacy_settings"},
}

BOOL_COLUMNS = {
    FANTASIES_TABLE: {"is_private"},
    STORIES_TABLE: {"is_favorite"},
}

DDL = [
    f"""
    CREATE TABLE IF NOT EXISTS {APPOINTMENTS_TABLE} (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        "date" TEXT NOT NULL,
        "time" TEXT NOT NULL,
        type TEXT NOT NULL DEFAULT 'shave',
        notes TEXT DEFAULT '',
        created_by TEXT,
        created_at TEXT NOT NULL,
        updated_at TEXT
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {FANTASIES_TABLE} (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        description TEXT NOT NULL,
        category TEXT NOT NULL DEFAULT 'romantic',
        intensity INTEGER NOT NULL DEFAULT 1,
        is_private INTEGER NOT NULL DEFAULT 0,
        tags TEXT DEFAULT '[]',
        created_by TEXT,
        created_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {MESSAGES_TABLE} (
        id TEXT PRIMARY KEY,
        content TEXT NOT NULL,
        sender_id TEXT NOT NULL,
        sender_role TEXT NOT NULL DEFAULT 'partner1',
        message_type TEXT NOT NULL DEFAULT 'text',
        media_url TEXT,
        created_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {AI_CONVERSATIONS_TABLE} (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        conversation_type TEXT NOT NULL DEFAULT 'general',
        user_message TEXT NOT NULL,
        ai_response TEXT NOT NULL,
        mood_tag TEXT,
        created_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {STORIES_TABLE} (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        content TEXT NOT NULL,
        category TEXT NOT NULL DEFAULT 'romantic',
        tags TEXT DEFAULT '[]',
        reading_time INTEGER DEFAULT 5,
        intensity INTEGER NOT NULL DEFAULT 1,
        source TEXT,
        is_favorite INTEGER NOT NULL DEFAULT 0,
        read_count INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {TOY_SESSIONS_TABLE} (
        id TEXT PRIMARY KEY,
        toy_name TEXT NOT NULL,
        toy_type TEXT NOT NULL,
        session_data TEXT DEFAULT '{{}}',
        duration TEXT,
        session_notes TEXT,
        mood_before INTEGER,
        created_by TEXT,
        created_at TEXT NOT NULL
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {PROFILES_TABLE} (
        id TEXT PRIMARY KEY,
        display_name TEXT,
        avatar_url TEXT,
        role TEXT NOT NULL DEFAULT 'partner1',
        preferences TEXT DEFAULT '{{}}',
        privacy_settings TEXT DEFAULT '{{}}',
        created_at TEXT NOT NULL,
        updated_at TEXT
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {MOOD_LOGS_TABLE} (
        id TEXT PRIMARY KEY,
        user_id TEXT NOT NULL,
        "date" TEXT NOT NULL,
        overall_mood INTEGER NOT NULL DEFAULT 5,
        intimacy_mood INTEGER NOT NULL DEFAULT 5,
        energy_level INTEGER NOT NULL DEFAULT 5,
        connection_feeling INTEGER NOT NULL DEFAULT 5,
        notes TEXT DEFAULT '',
        created_at TEXT NOT NULL,
        UNIQUE (user_id, "date")
    )
    """,
    f"""
    CREATE TABLE IF NOT EXISTS {USERS_TABLE} (
        id TEXT PRIMARY KEY,
        email TEXT NOT NULL UNIQUE,
        password_hash TEXT NOT NULL,
        role TEXT NOT NULL DEFAULT 'partner1',
        created_at TEXT NOT NULL
    )
    """,
]

INDEXES = [
    f"CREATE INDEX IF NOT EXISTS idx_{MESSAGES_TABLE}_created ON {MESSAGES_TABLE} (created_at)",
    f"CREATE INDEX IF NOT EXISTS idx_{AI_CONVERSATIONS_TABLE}_user ON {AI_CONVERSATIONS_TABLE} (user_id, created_at)",
    f"CREATE INDEX IF NOT EXISTS idx_{APPOINTMENTS_TABLE}_date ON {APPOINTMENTS_TABLE} (\"date\")",
]


def init_schema(engine):
    with engine.begin() as conn:
        for statement in DDL:
            conn.execute(sql_text(statement))
        for statement in INDEXES:
            conn.execute(sql_text(statement))
    logger.info("Schema ready (%d tables)", len(DDL))
