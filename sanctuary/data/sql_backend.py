from __future__ import annotations

import json
import logging
import secrets
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

import bcrypt
from sqlalchemy import bindparam, create_engine, text as sql_text
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

from sanctuary.constants import DEFAULT_ROLE, READ_COUNT_RPC, STORIES_TABLE, USERS_TABLE
from sanctuary.data.backend import AuthError, Backend, BackendError, Identity, new_id, utc_now_iso
from sanctuary.data.realtime import ChangeFeed
from sanctuary.data.schema import BOOL_COLUMNS, JSON_COLUMNS, TABLE_COLUMNS, init_schema

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
MAX_PASSWORD_BYTES = 72
MIN_PASSWORD_LENGTH = 6


def normalize_database_url(database_url):
    url = str(database_url or "").strip()
    if not url:
        return url
    if url.startswith("postgres://"):
        url = "postgresql+psycopg2://" + url[len("postgres://") :]
    elif url.startswith("postgresql://"):
        url = "postgresql+psycopg2://" + url[len("postgresql://") :]

    try:
        parsed = urlparse(url)
        if "channel_binding=" in (parsed.query or ""):
            query_items = [(k, v) for k, v in parse_qsl(parsed.query, keep_blank_values=True) if k != "channel_binding"]
            parsed = parsed._replace(query=urlencode(query_items))
            url = urlunparse(parsed)
    except ValueError:
        return url
    return url


def create_sql_engine(database_url):
    url = normalize_database_url(database_url)
    if url in {"sqlite://", "sqlite:///:memory:"}:
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            future=True,
        )
    if url.startswith("sqlite"):
        return create_engine(url, connect_args={"check_same_thread": False}, future=True)
    return create_engine(url, pool_pre_ping=True, future=True)


def hash_password(password, rounds=None):
    salt = bcrypt.gensalt(rounds=rounds or BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password, stored):
    try:
        return bcrypt.checkpw(password.encode("utf-8"), str(stored or "").encode("utf-8"))
    except ValueError:
        return False


def _quote(column):
    return f'"{column}"'


class SqlBackend(Backend):
    """Backend over a SQLAlchemy engine, with in-process insert notifications."""

    name = "sql"

    def __init__(self, engine, feed=None, create_schema=True):
        self.engine = engine
        self.feed = feed or ChangeFeed()
        self._rpcs = {READ_COUNT_RPC: self._increment_read_count}
        if create_schema:
            try:
                init_schema(engine)
            except SQLAlchemyError as exc:
                raise BackendError(f"Schema bootstrap failed: {exc}") from exc

    # --- row encoding ---

    def _columns(self, table):
        columns = TABLE_COLUMNS.get(table)
        if columns is None:
            raise BackendError(f'relation "{table}" does not exist', status=404, code="42P01")
        return columns

    def _check_columns(self, table, names):
        known = set(self._columns(table))
        unknown = [name for name in names if name not in known]
        if unknown:
            raise BackendError(
                f"Could not find the '{unknown[0]}' column of '{table}'",
                status=400,
                code="PGRST204",
            )

    def _encode(self, table, row):
        json_cols = JSON_COLUMNS.get(table, set())
        bool_cols = BOOL_COLUMNS.get(table, set())
        encoded = {}
        for key, value in row.items():
            if key in json_cols and value is not None and not isinstance(value, str):
                encoded[key] = json.dumps(value, ensure_ascii=False)
            elif key in bool_cols and value is not None:
                encoded[key] = int(bool(value))
            else:
                encoded[key] = value
        return encoded

    def _decode(self, table, row):
        json_cols = JSON_COLUMNS.get(table, set())
        bool_cols = BOOL_COLUMNS.get(table, set())
        decoded = dict(row)
        for key in json_cols:
            raw = decoded.get(key)
            if isinstance(raw, str):
                try:
                    decoded[key] = json.loads(raw)
                except ValueError:
                    logger.warning("Undecodable JSON in %s.%s", table, key)
        for key in bool_cols:
            if key in decoded and decoded[key] is not None:
                decoded[key] = bool(decoded[key])
        return decoded

    def _where(self, table, filters, prefix="f_"):
        filters = dict(filters or {})
        self._check_columns(table, filters.keys())
        clauses = []
        params = {}
        for idx, (column, value) in enumerate(filters.items()):
            if value is None:
                clauses.append(f"{_quote(column)} IS NULL")
                continue
            param = f"{prefix}{idx}"
            clauses.append(f"{_quote(column)} = :{param}")
            params[param] = self._encode(table, {column: value})[column]
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        return where, params

    def _fetch_ids(self, conn, table, ids):
        if not ids:
            return []
        statement = sql_text(f"SELECT * FROM {table} WHERE id IN :ids").bindparams(bindparam("ids", expanding=True))
        rows = conn.execute(statement, {"ids": list(ids)}).mappings().all()
        by_id = {row["id"]: self._decode(table, row) for row in rows}
        return [by_id[row_id] for row_id in ids if row_id in by_id]

    # --- table operations ---

    def select(self, table, filters=None, order=None, ascending=True, limit=None):
        self._columns(table)
        where, params = self._where(table, filters)
        query = f"SELECT * FROM {table}{where}"
        if order:
            self._check_columns(table, [order])
            query += f" ORDER BY {_quote(order)} {'ASC' if ascending else 'DESC'}"
        if limit:
            query += " LIMIT :limit"
            params["limit"] = int(limit)
        try:
            with self.engine.connect() as conn:
                rows = conn.execute(sql_text(query), params).mappings().all()
        except SQLAlchemyError as exc:
            raise BackendError(f"select on {table} failed: {exc}") from exc
        return [self._decode(table, row) for row in rows]

    def insert(self, table, rows):
        prepared = []
        for row in rows:
            payload = dict(row)
            payload.setdefault("id", new_id())
            payload.setdefault("created_at", utc_now_iso())
            self._check_columns(table, payload.keys())
            prepared.append(self._encode(table, payload))
        try:
            with self.engine.begin() as conn:
                for payload in prepared:
                    columns = list(payload.keys())
                    conn.execute(
                        sql_text(
                            f"INSERT INTO {table} ({', '.join(_quote(col) for col in columns)}) "
                            f"VALUES ({', '.join(':' + col for col in columns)})"
                        ),
                        payload,
                    )
                inserted = self._fetch_ids(conn, table, [payload["id"] for payload in prepared])
        except SQLAlchemyError as exc:
            raise BackendError(f"insert into {table} failed: {exc}") from exc
        for row in inserted:
            self.feed.publish(table, row)
        return inserted

    def update(self, table, values, filters):
        if not filters:
            raise BackendError("UPDATE requires a WHERE clause", status=400, code="21000")
        self._check_columns(table, values.keys())
        where, where_params = self._where(table, filters)
        encoded = self._encode(table, values)
        assignments = []
        params = dict(where_params)
        for idx, (column, value) in enumerate(encoded.items()):
            param = f"v_{idx}"
            assignments.append(f"{_quote(column)} = :{param}")
            params[param] = value
        try:
            with self.engine.begin() as conn:
                ids = [
                    row[0]
                    for row in conn.execute(sql_text(f"SELECT id FROM {table}{where}"), where_params).fetchall()
                ]
                if ids and assignments:
                    conn.execute(sql_text(f"UPDATE {table} SET {', '.join(assignments)}{where}"), params)
                return self._fetch_ids(conn, table, ids)
        except SQLAlchemyError as exc:
            raise BackendError(f"update on {table} failed: {exc}") from exc

    def delete(self, table, filters):
        if not filters:
            raise BackendError("DELETE requires a WHERE clause", status=400, code="21000")
        where, params = self._where(table, filters)
        try:
            with self.engine.begin() as conn:
                conn.execute(sql_text(f"DELETE FROM {table}{where}"), params)
        except SQLAlchemyError as exc:
            raise BackendError(f"delete on {table} failed: {exc}") from exc

    def upsert(self, table, rows, on_conflict):
        self._check_columns(table, on_conflict)
        results = []
        try:
            with self.engine.begin() as conn:
                for row in rows:
                    payload = dict(row)
                    payload.setdefault("id", new_id())
                    payload.setdefault("created_at", utc_now_iso())
                    self._check_columns(table, payload.keys())
                    payload = self._encode(table, payload)
                    columns = list(payload.keys())
                    updates = [col for col in columns if col not in set(on_conflict) | {"id", "created_at"}]
                    update_clause = ", ".join(f"{_quote(col)}=EXCLUDED.{_quote(col)}" for col in updates)
                    conflict_action = f"DO UPDATE SET {update_clause}" if updates else "DO NOTHING"
                    conn.execute(
                        sql_text(
                            f"""
                            INSERT INTO {table} ({', '.join(_quote(col) for col in columns)})
                            VALUES ({', '.join(':' + col for col in columns)})
                            ON CONFLICT({', '.join(_quote(col) for col in on_conflict)}) {conflict_action}
                            """
                        ),
                        payload,
                    )
                    where, params = self._where(table, {col: row[col] for col in on_conflict})
                    stored = conn.execute(sql_text(f"SELECT * FROM {table}{where}"), params).mappings().fetchone()
                    if stored:
                        results.append(self._decode(table, stored))
        except SQLAlchemyError as exc:
            raise BackendError(f"upsert on {table} failed: {exc}") from exc
        return results

    def rpc(self, name, params=None):
        handler = self._rpcs.get(name)
        if handler is None:
            raise BackendError(f"Could not find the function {name}", status=404, code="PGRST202")
        try:
            return handler(**(params or {}))
        except SQLAlchemyError as exc:
            raise BackendError(f"rpc {name} failed: {exc}") from exc

    def _increment_read_count(self, story_id):
        with self.engine.begin() as conn:
            conn.execute(
                sql_text(f"UPDATE {STORIES_TABLE} SET read_count = COALESCE(read_count, 0) + 1 WHERE id = :id"),
                {"id": story_id},
            )
        return None

    # --- auth ---

    def sign_up(self, email, password, role=DEFAULT_ROLE):
        email = str(email or "").strip().lower()
        if not email or "@" not in email:
            raise AuthError("Unable to validate email address: invalid format", status=400)
        if len(password or "") < MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password should be at least {MIN_PASSWORD_LENGTH} characters", status=422)
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise AuthError(f"Password cannot be longer than {MAX_PASSWORD_BYTES} bytes", status=422)
        user = {
            "id": new_id(),
            "email": email,
            "password_hash": hash_password(password),
            "role": role or DEFAULT_ROLE,
            "created_at": utc_now_iso(),
        }
        try:
            with self.engine.begin() as conn:
                conn.execute(
                    sql_text(
                        f"INSERT INTO {USERS_TABLE} (id, email, password_hash, role, created_at) "
                        "VALUES (:id, :email, :password_hash, :role, :created_at)"
                    ),
                    user,
                )
        except IntegrityError as exc:
            raise AuthError("User already registered", status=422) from exc
        except SQLAlchemyError as exc:
            raise AuthError(f"Sign up failed: {exc}") from exc
        logger.info("Registered account %s", email)
        return self._identity(user)

    def sign_in(self, email, password):
        email = str(email or "").strip().lower()
        try:
            with self.engine.connect() as conn:
                user = conn.execute(
                    sql_text(f"SELECT id, email, password_hash, role FROM {USERS_TABLE} WHERE email = :email"),
                    {"email": email},
                ).mappings().fetchone()
        except SQLAlchemyError as exc:
            raise AuthError(f"Sign in failed: {exc}") from exc
        if not user or not verify_password(password or "", user["password_hash"]):
            raise AuthError("Invalid login credentials", status=400)
        return self._identity(user)

    def sign_out(self, identity=None):
        if identity is not None:
            logger.info("Signed out %s", identity.email)

    def _identity(self, user):
        return Identity.from_user(
            {"id": user["id"], "email": user["email"], "user_metadata": {"role": user["role"]}},
            access_token=secrets.token_urlsafe(24),
        )

    # --- realtime ---

    def subscribe(self, table, callback, since=None):
        self._columns(table)
        return self.feed.subscribe(table, callback)

    def close(self):
        self.engine.dispose()
