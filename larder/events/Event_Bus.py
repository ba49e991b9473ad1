"""Per-store observer channel.

Each store (pantry ledger, meal calendar, nutrition prefs) owns one EventBus
and publishes a ChangeEvent after every mutation. Topics used so far:
  pantry.changed    -> actions add | update | remove | clear | import
  meals.changed     -> actions add | update | remove | clear | import | status | move
  nutrition.changed -> actions update | preset | reset | import

Subscribers are plain callables taking the ChangeEvent. They run in
registration order; an exception in one is logged and the rest still run.
"""
from __future__ import annotations
import logging
from typing import Any, Callable, List

logger = logging.getLogger(__name__)

# --- Topic constants (used across modules) ---
PANTRY_CHANGED = "pantry.changed"
MEALS_CHANGED = "meals.changed"
NUTRITION_CHANGED = "nutrition.changed"


class ChangeEvent:
	def __init__(self, topic: str, action: str, item: Any = None, snapshot: Any = None):
		self.topic = topic
		self.action = action
		self.item = item
		self.snapshot = snapshot if snapshot is not None else {}

	def __str__(self) -> str:
		return f"{self.topic}:{self.action} {self.item!r}"

	__repr__ = __str__


class EventBus:
	def __init__(self):
		self._subscribers: List[Callable[[ChangeEvent], None]] = []

	def subscribe(self, callback: Callable[[ChangeEvent], None]) -> Callable[[], None]:
		"""Register ``callback``; returns a function that unregisters it."""
		if callback not in self._subscribers:
			self._subscribers.append(callback)

		def unsubscribe():
			self.unsubscribe(callback)

		return unsubscribe

	def unsubscribe(self, callback: Callable[[ChangeEvent], None]):
		try:
			self._subscribers.remove(callback)
		except ValueError:
			pass

	def publish(self, event: ChangeEvent):
		for cb in list(self._subscribers):
			try:
				cb(event)
			except Exception:
				logger.exception("Error delivering %s to %r", event.topic, cb)

	def __len__(self) -> int:
		return len(self._subscribers)


__all__ = ['EventBus', 'ChangeEvent', 'PANTRY_CHANGED', 'MEALS_CHANGED', 'NUTRITION_CHANGED']
