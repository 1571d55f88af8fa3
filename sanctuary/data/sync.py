from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError

from sanctuary.constants import MESSAGES_TABLE
from sanctuary.data.backend import Backend, BackendError, Identity, Row
from sanctuary.data.models import MessageForm

logger = logging.getLogger(__name__)


def _always_confirm():
    return True


class TableSync:
    """Local copy of one scoped, ordered table read, with write-back helpers.

    Failures are logged and swallowed: ``rows`` keeps its previous content and
    the mutating helpers report ``False``/``None``.
    """

    def __init__(
        self,
        backend: Backend,
        table: str,
        order_by: str = "created_at",
        ascending: bool = True,
        scope: Optional[Dict] = None,
    ):
        self.backend = backend
        self.table = table
        self.order_by = order_by
        self.ascending = ascending
        self.scope = dict(scope or {})
        self.rows: List[Row] = []
        self.loaded = False

    def refresh(self) -> bool:
        try:
            rows = self.backend.select(
                self.table,
                filters=self.scope,
                order=self.order_by,
                ascending=self.ascending,
            )
        except BackendError:
            logger.exception("Error fetching %s", self.table)
            return False
        self.rows = list(rows or [])
        self.loaded = True
        return True

    def ensure_loaded(self) -> List[Row]:
        if not self.loaded:
            self.refresh()
        return self.rows

    def find(self, row_id) -> Optional[Row]:
        for row in self.rows:
            if row.get("id") == row_id:
                return row
        return None

    def create(self, payload: Row, splice: bool = False) -> Optional[Row]:
        try:
            created = self.backend.insert(self.table, [payload])
        except BackendError:
            logger.exception("Error saving %s", self.table)
            return None
        row = created[0] if created else dict(payload)
        if splice:
            self.rows.append(row)
        else:
            self.refresh()
        return row

    def update(self, row_id, patch: Row, splice: bool = False) -> bool:
        try:
            updated = self.backend.update(self.table, patch, {"id": row_id})
        except BackendError:
            logger.exception("Error updating %s %s", self.table, row_id)
            return False
        if splice:
            changes = updated[0] if updated else patch
            self.rows = [{**row, **changes} if row.get("id") == row_id else row for row in self.rows]
        else:
            self.refresh()
        return True

    def delete(self, row_id, confirm: Callable[[], bool] = _always_confirm) -> bool:
        if not confirm():
            return False
        try:
            self.backend.delete(self.table, {"id": row_id})
        except BackendError:
            logger.exception("Error deleting %s %s", self.table, row_id)
            return False
        self.refresh()
        return True


class ChatFeed(TableSync):
    """Message list that grows from insert notifications in arrival order."""

    def __init__(self, backend: Backend, identity: Identity):
        super().__init__(backend, MESSAGES_TABLE, order_by="created_at", ascending=True)
        self.identity = identity
        self.subscription = None

    def start(self) -> None:
        if self.subscription is not None and self.subscription.active:
            return
        self.refresh()
        since = str(self.rows[-1].get("created_at")) if self.rows else None
        try:
            self.subscription = self.backend.subscribe(self.table, self.receive, since=since)
        except BackendError:
            logger.exception("Error subscribing to %s", self.table)

    def receive(self, row: Row) -> None:
        self.rows.append(row)

    def pump(self) -> int:
        if self.subscription is None:
            return 0
        try:
            return self.subscription.pump()
        except BackendError:
            logger.exception("Error polling %s", self.table)
            return 0

    def send(self, content: str, message_type: str = "text", media_url: str | None = None) -> bool:
        try:
            form = MessageForm(content=content or "", message_type=message_type, media_url=media_url)
        except ValidationError:
            return False
        payload = {
            "content": form.content,
            "sender_id": self.identity.id,
            "sender_role": self.identity.role,
            "message_type": form.message_type,
        }
        if form.media_url:
            payload["media_url"] = form.media_url
        try:
            self.backend.insert(self.table, [payload])
        except BackendError:
            logger.exception("Error sending message")
            return False
        return True

    def stop(self) -> None:
        if self.subscription is not None:
            self.subscription.unsubscribe()
            self.subscription = None

    def is_own(self, row: Row) -> bool:
        return row.get("sender_role") == self.identity.role
