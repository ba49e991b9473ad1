"""Shared plumbing for the stateful stores: persistence, sync hook, notification.

A mutation runs as: change in-memory state -> save snapshot -> schedule
remote push -> notify subscribers. Failures after the first step are logged
and never undo the in-memory change.
"""
import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Optional

from larder.events.Event_Bus import ChangeEvent, EventBus

logger = logging.getLogger(__name__)


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class ObservableStore:
    topic = "store.changed"

    def __init__(self, repository=None, sync_hook: Optional[Callable[[str, str], None]] = None,
                 bus: Optional[EventBus] = None, clock: Optional[Callable[[], str]] = None):
        self._repository = repository
        self._sync_hook = sync_hook
        self._bus = bus if bus is not None else EventBus()
        self._clock = clock or utc_now
        # FastAPI runs sync handlers in a threadpool; mutators hold this
        self._lock = threading.RLock()

    # --- Observer ----------------------------------------------------------
    def subscribe(self, callback: Callable[[ChangeEvent], None]) -> Callable[[], None]:
        return self._bus.subscribe(callback)

    @property
    def bus(self) -> EventBus:
        return self._bus

    # --- Persistence -------------------------------------------------------
    def snapshot(self) -> Any:
        raise NotImplementedError

    def _read_snapshot(self) -> Optional[Any]:
        if self._repository is None:
            return None
        try:
            return self._repository.load()
        except Exception:
            logger.exception("Failed to load %s snapshot", self.topic)
            return None

    def _persist(self, snapshot: Any):
        if self._repository is None:
            return
        try:
            self._repository.save(snapshot)
        except Exception:
            logger.exception("Failed to persist %s snapshot", self.topic)

    def _schedule_sync(self, action: str):
        if self._sync_hook is None:
            return
        try:
            self._sync_hook(self.topic, action)
        except Exception:
            logger.exception("Sync hook failed for %s:%s", self.topic, action)

    def _commit(self, action: str, item: Any = None):
        snapshot = self.snapshot()
        self._persist(snapshot)
        self._schedule_sync(action)
        self._bus.publish(ChangeEvent(self.topic, action, item, snapshot))

    def _now(self) -> str:
        return self._clock()
