from __future__ import annotations

import inspect
import logging
import threading
import weakref
from typing import Callable, Dict, List, Optional

from sanctuary.data.backend import Row, RowCallback

logger = logging.getLogger(__name__)


class Subscription:
    """Insert-event subscription on one table.

    Push transports call ``deliver`` themselves; ``pump`` is a no-op for them.
    With ``weak=True`` a bound-method callback is held through ``WeakMethod``
    and the subscription closes itself once its owner is collected.
    """

    def __init__(
        self,
        table: str,
        callback: RowCallback,
        on_close: Optional[Callable[["Subscription"], None]] = None,
        weak: bool = False,
    ):
        self.table = table
        if weak and inspect.ismethod(callback):
            self._callback_ref = weakref.WeakMethod(callback)
        else:
            self._callback_ref = lambda: callback
        self._on_close = on_close
        self.active = True

    @property
    def alive(self) -> bool:
        return self.active and self._callback_ref() is not None

    def deliver(self, row: Row) -> None:
        if not self.active:
            return
        callback = self._callback_ref()
        if callback is None:
            self.unsubscribe()
            return
        callback(row)

    def pump(self) -> int:
        return 0

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        if self._on_close is not None:
            self._on_close(self)


class PollingSubscription(Subscription):
    def __init__(self, table: str, callback: RowCallback, fetch_since: Callable[[str], List[Row]], cursor: str):
        super().__init__(table, callback)
        self._fetch_since = fetch_since
        self.cursor = cursor

    def pump(self) -> int:
        if not self.active:
            return 0
        rows = self._fetch_since(self.cursor)
        for row in rows:
            self.deliver(row)
            created_at = row.get("created_at")
            if created_at and str(created_at) > self.cursor:
                self.cursor = str(created_at)
        return len(rows)


class ChangeFeed:
    """In-process fan-out of insert events, shared by every session of a SQL backend.

    Listeners whose owning object has been garbage-collected are dropped on
    the next publish or count.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._subscribers: Dict[str, List[Subscription]] = {}

    def subscribe(self, table: str, callback: RowCallback) -> Subscription:
        subscription = Subscription(table, callback, on_close=self._remove, weak=True)
        with self._lock:
            self._subscribers.setdefault(table, []).append(subscription)
        logger.debug("Subscribed to %s (%d listeners)", table, self.listener_count(table))
        return subscription

    def _remove(self, subscription: Subscription) -> None:
        with self._lock:
            listeners = self._subscribers.get(subscription.table, [])
            if subscription in listeners:
                listeners.remove(subscription)

    def _live(self, table: str) -> List[Subscription]:
        with self._lock:
            listeners = self._subscribers.get(table, [])
            alive = [subscription for subscription in listeners if subscription.alive]
            if len(alive) != len(listeners):
                logger.debug("Dropped %d abandoned listeners on %s", len(listeners) - len(alive), table)
                self._subscribers[table] = alive
            return list(alive)

    def listener_count(self, table: str) -> int:
        return len(self._live(table))

    def publish(self, table: str, row: Row) -> None:
        for subscription in self._live(table):
            try:
                subscription.deliver(dict(row))
            except Exception:
                logger.exception("Insert listener on %s failed", table)
