"""Web-facing observer for store change events.

A ChangeLog subscribes to the stores of one session and keeps a lightweight
in-memory ring buffer of recent changes that the API (/api/events) exposes
for polling.

Design:
  * Each event stored with an auto-increment integer id (cursor) so clients
    can request only newer events (since=<last_id_seen>).
  * A Lock guards the buffer; FastAPI runs sync handlers in a threadpool.
  * A max_events cap prevents unbounded memory growth.
"""
from __future__ import annotations
from typing import List, Dict, Any, Callable
from threading import Lock
from datetime import datetime, timezone
import logging

from .Event_Bus import ChangeEvent

logger = logging.getLogger(__name__)

MAX_EVENTS = 300  # keep a few hundred recent events


class ChangeLog:
    def __init__(self, max_events: int = MAX_EVENTS):
        self._lock = Lock()
        self._events: List[Dict[str, Any]] = []
        self._next_id = 1
        self.max_events = max_events
        self._unsubscribers: List[Callable[[], None]] = []

    def attach(self, *stores) -> "ChangeLog":
        for store in stores:
            self._unsubscribers.append(store.subscribe(self.record))
        return self

    def detach(self):
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    def record(self, event: ChangeEvent):
        with self._lock:
            evt: Dict[str, Any] = {
                'id': self._next_id,
                'type': event.topic,
                'action': event.action,
                'ts': datetime.now(timezone.utc).isoformat(),
            }
            # Only a small, JSON-safe view of the affected item
            item = event.item
            if hasattr(item, 'to_dict'):
                item = item.to_dict()
            if isinstance(item, dict):
                evt['item'] = item
            self._events.append(evt)
            self._next_id += 1
            # Trim buffer
            if len(self._events) > self.max_events:
                del self._events[: len(self._events) - self.max_events]

    def get_events(self, since: int | None = None) -> Dict[str, Any]:
        """Return events newer than 'since' (exclusive).

        If since is None, returns the buffered events.
        Response includes next_cursor (largest id) so client can poll with since=next_cursor.
        """
        with self._lock:
            if since is None:
                data = list(self._events)
            else:
                data = [e for e in self._events if e['id'] > since]
            next_cursor = self._events[-1]['id'] if self._events else since or 0
        return {'events': data, 'next_cursor': next_cursor}


__all__ = ['ChangeLog', 'MAX_EVENTS']
