from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional
from uuid import uuid4

from sanctuary.constants import DEFAULT_ROLE

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
RowCallback = Callable[[Row], None]


class BackendError(Exception):
    """A failed backend call: transport, HTTP status or SQL error."""

    def __init__(self, message: str, status: int | None = None, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code

    def __str__(self) -> str:
        if self.status:
            return f"{self.message} (status {self.status})"
        return self.message


class AuthError(BackendError):
    pass


def new_id() -> str:
    return uuid4().hex


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Identity:
    id: str
    email: str
    role: str = DEFAULT_ROLE
    access_token: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_user(cls, user: dict, access_token: str | None = None) -> "Identity":
        metadata = dict(user.get("user_metadata") or {})
        return cls(
            id=str(user.get("id") or ""),
            email=str(user.get("email") or ""),
            role=str(metadata.get("role") or DEFAULT_ROLE),
            access_token=access_token,
            metadata=metadata,
        )

    @property
    def partner_label(self) -> str:
        return "Partner 2" if self.role == "partner1" else "Partner 1"

    @property
    def role_label(self) -> str:
        return self.role.replace("partner", "Partner ")

    @property
    def default_display_name(self) -> str:
        local = self.email.split("@")[0] if self.email else ""
        return local or "Partner"


class Backend:
    """Table-oriented persistence contract shared by the SQL and HTTP backends.

    Filters are equality predicates (``{"user_id": "abc"}``). Mutating calls
    return the affected rows as the backend stored them.
    """

    name = "backend"

    def select(
        self,
        table: str,
        filters: Optional[Row] = None,
        order: Optional[str] = None,
        ascending: bool = True,
        limit: Optional[int] = None,
    ) -> List[Row]:
        raise NotImplementedError

    def insert(self, table: str, rows: List[Row]) -> List[Row]:
        raise NotImplementedError

    def update(self, table: str, values: Row, filters: Row) -> List[Row]:
        raise NotImplementedError

    def delete(self, table: str, filters: Row) -> None:
        raise NotImplementedError

    def upsert(self, table: str, rows: List[Row], on_conflict: List[str]) -> List[Row]:
        raise NotImplementedError

    def rpc(self, name: str, params: Optional[Row] = None) -> Any:
        raise NotImplementedError

    def sign_in(self, email: str, password: str) -> Identity:
        raise NotImplementedError

    def sign_up(self, email: str, password: str, role: str = DEFAULT_ROLE) -> Identity:
        raise NotImplementedError

    def sign_out(self, identity: Identity | None = None) -> None:
        raise NotImplementedError

    def subscribe(self, table: str, callback: RowCallback, since: str | None = None):
        raise NotImplementedError

    def select_one(self, table: str, filters: Row) -> Optional[Row]:
        rows = self.select(table, filters=filters, limit=1)
        return rows[0] if rows else None

    def close(self) -> None:
        return None


def build_backend(settings, engine=None) -> Backend:
    if not settings.is_configured:
        raise BackendError("Backend URL and key are not configured")
    if settings.uses_http_backend:
        from sanctuary.data.rest_backend import RestBackend

        logger.info("Using HTTP backend at %s", settings.backend_url)
        return RestBackend(settings.backend_url, settings.backend_key, timeout=settings.request_timeout)

    from sqlalchemy.exc import ArgumentError

    from sanctuary.data.sql_backend import SqlBackend, create_sql_engine

    if engine is None:
        try:
            engine = create_sql_engine(settings.backend_url)
        except (ArgumentError, ImportError) as exc:
            raise BackendError(f"Cannot open database URL: {exc}") from exc
    logger.info("Using SQL backend")
    return SqlBackend(engine)
