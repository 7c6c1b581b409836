"""Simple Event Bus / Observer implementation for storage alerts.

Event names used so far:
  storage.full -> payload {"key": str, "size": int, "limit": int}
  storage.corrupt -> payload {"key": str, "error": str}
  storage.too_large -> payload {"key": str, "size": int, "limit": int}
  plan.partial_replace -> payload {"error": str}

Subscribers are callables taking (event_name, payload).
"""
from __future__ import annotations
import logging
from collections import defaultdict
from typing import Callable, Any, Dict, List

logger = logging.getLogger(__name__)

# --- Event name constants (used across modules) ---
STORAGE_FULL = "storage.full"
STORAGE_CORRUPT = "storage.corrupt"
STORAGE_TOO_LARGE = "storage.too_large"
PLAN_PARTIAL_REPLACE = "plan.partial_replace"


class EventBus:
	def __init__(self):
		self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = defaultdict(list)

	def subscribe(self, event_name: str, callback: Callable[[str, Any], None]):
		if callback not in self._subscribers[event_name]:
			self._subscribers[event_name].append(callback)

	def publish(self, event_name: str, payload: Any):
		for cb in list(self._subscribers.get(event_name, [])):
			try:
				cb(event_name, payload)
			except Exception:  # pragma: no cover
				logger.exception("Error delivering %s to %r", event_name, cb)


# A singleton-like instance (can be imported)
GLOBAL_EVENT_BUS = EventBus()


__all__ = [
	'EventBus', 'GLOBAL_EVENT_BUS',
	'STORAGE_FULL', 'STORAGE_CORRUPT', 'STORAGE_TOO_LARGE', 'PLAN_PARTIAL_REPLACE'
]
