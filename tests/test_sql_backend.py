import pytest

from sanctuary.constants import MESSAGES_TABLE, MOOD_LOGS_TABLE, PROFILES_TABLE, STORIES_TABLE
from sanctuary.data.backend import AuthError, BackendError, build_backend
from sanctuary.data.sql_backend import SqlBackend, hash_password, normalize_database_url, verify_password
from sanctuary.settings import get_settings


def test_password_hash_verifies():
    stored = hash_password("secret123", rounds=4)
    assert stored.startswith("$2b$04$")
    assert verify_password("secret123", stored)
    assert not verify_password("secret124", stored)
    assert not verify_password("secret123", "garbage")
    assert hash_password("secret123", rounds=4) != stored


def test_sign_up_rejects_passwords_bcrypt_would_truncate(backend):
    with pytest.raises(AuthError, match="72 bytes"):
        backend.sign_up("alex@example.com", "x" * 73)


def test_normalize_database_url():
    assert normalize_database_url("postgres://u:p@h/db") == "postgresql+psycopg2://u:p@h/db"
    assert normalize_database_url("postgresql://u:p@h/db?channel_binding=require&sslmode=require") == (
        "postgresql+psycopg2://u:p@h/db?sslmode=require"
    )
    assert normalize_database_url("sqlite:///local.db") == "sqlite:///local.db"


def test_build_backend_picks_sql_for_sqlalchemy_urls():
    backend = build_backend(get_settings(backend_url="sqlite://", backend_key="local"))
    try:
        assert isinstance(backend, SqlBackend)
    finally:
        backend.close()


def test_build_backend_requires_configuration():
    with pytest.raises(BackendError):
        build_backend(get_settings(backend_url="", backend_key=""))


@pytest.mark.parametrize("url", ["my-project.supabase.co", "nosuchdialect://host/db"])
def test_build_backend_reports_unusable_database_urls(url):
    with pytest.raises(BackendError, match="Cannot open database URL"):
        build_backend(get_settings(backend_url=url, backend_key="k"))


def test_sign_up_duplicate_and_bad_credentials(backend):
    backend.sign_up("alex@example.com", "secret123")
    with pytest.raises(AuthError, match="already registered"):
        backend.sign_up("ALEX@example.com", "another1")
    with pytest.raises(AuthError, match="Invalid login credentials"):
        backend.sign_in("alex@example.com", "wrong-pass")
    with pytest.raises(AuthError, match="Invalid login credentials"):
        backend.sign_in("nobody@example.com", "secret123")


def test_sign_up_validates_input(backend):
    with pytest.raises(AuthError, match="at least"):
        backend.sign_up("alex@example.com", "123")
    with pytest.raises(AuthError, match="email"):
        backend.sign_up("not-an-email", "secret123")


def test_identity_defaults_to_partner1(backend):
    identity = backend.sign_up("alex@example.com", "secret123", role=None)
    assert identity.role == "partner1"
    assert identity.access_token


def test_json_and_bool_columns_round_trip(backend):
    backend.insert(
        STORIES_TABLE,
        [{"title": "Lake", "content": "...", "tags": ["summer", "cabin"], "is_favorite": True}],
    )
    story = backend.select(STORIES_TABLE)[0]
    assert story["tags"] == ["summer", "cabin"]
    assert story["is_favorite"] is True
    assert story["read_count"] == 0


def test_unknown_table_and_column_raise(backend):
    with pytest.raises(BackendError) as table_error:
        backend.select("nope")
    assert table_error.value.code == "42P01"
    with pytest.raises(BackendError) as column_error:
        backend.insert(MESSAGES_TABLE, [{"content": "x", "sender_id": "u", "colour": "red"}])
    assert column_error.value.code == "PGRST204"


def test_update_and_delete_need_filters(backend):
    with pytest.raises(BackendError):
        backend.update(MESSAGES_TABLE, {"content": "x"}, {})
    with pytest.raises(BackendError):
        backend.delete(MESSAGES_TABLE, {})


def test_update_returns_changed_rows(backend):
    created = backend.insert(PROFILES_TABLE, [{"id": "p1", "display_name": "Alex", "preferences": {}}])[0]
    updated = backend.update(PROFILES_TABLE, {"display_name": "Al"}, {"id": created["id"]})
    assert [row["display_name"] for row in updated] == ["Al"]
    assert backend.update(PROFILES_TABLE, {"display_name": "x"}, {"id": "missing"}) == []


def test_filter_on_null(backend):
    backend.insert(MESSAGES_TABLE, [{"content": "a", "sender_id": "u"}])
    backend.insert(MESSAGES_TABLE, [{"content": "b", "sender_id": "u", "media_url": "https://img"}])
    rows = backend.select(MESSAGES_TABLE, filters={"media_url": None})
    assert [row["content"] for row in rows] == ["a"]


def test_upsert_keeps_one_row_per_conflict_key(backend):
    first = backend.upsert(
        MOOD_LOGS_TABLE,
        [{"user_id": "u1", "date": "2024-03-01", "overall_mood": 4}],
        on_conflict=["user_id", "date"],
    )
    second = backend.upsert(
        MOOD_LOGS_TABLE,
        [{"user_id": "u1", "date": "2024-03-01", "overall_mood": 9}],
        on_conflict=["user_id", "date"],
    )
    rows = backend.select(MOOD_LOGS_TABLE, filters={"user_id": "u1"})
    assert len(rows) == 1
    assert rows[0]["overall_mood"] == 9
    assert first[0]["id"] == second[0]["id"]


def test_read_count_rpc(backend):
    story = backend.insert(STORIES_TABLE, [{"title": "Lake", "content": "..."}])[0]
    backend.rpc("increment_read_count", {"story_id": story["id"]})
    backend.rpc("increment_read_count", {"story_id": story["id"]})
    assert backend.select_one(STORIES_TABLE, {"id": story["id"]})["read_count"] == 2


def test_unknown_rpc_raises(backend):
    with pytest.raises(BackendError) as error:
        backend.rpc("drop_everything")
    assert error.value.code == "PGRST202"


def test_listener_failure_does_not_break_insert(backend):
    received = []

    def broken(row):
        raise RuntimeError("listener bug")

    backend.subscribe(MESSAGES_TABLE, broken)
    backend.subscribe(MESSAGES_TABLE, received.append)
    backend.insert(MESSAGES_TABLE, [{"content": "hi", "sender_id": "u"}])
    assert [row["content"] for row in received] == ["hi"]


def test_insert_events_are_table_scoped(backend):
    received = []
    backend.subscribe(MESSAGES_TABLE, received.append)
    backend.insert(STORIES_TABLE, [{"title": "Lake", "content": "..."}])
    assert received == []
