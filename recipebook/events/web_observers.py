"""Web-facing observers for storage events.

This module subscribes to the GLOBAL_EVENT_BUS for:
  - storage.full
  - storage.corrupt
  - storage.too_large
  - plan.partial_replace

and keeps a lightweight in-memory ring buffer of recent events that the web
layer (GET /api/events) serves, so a client can tell the user that a write
was rejected or that the local cache was reset.

Design:
  * Each event stored with an auto-increment integer id (cursor) so clients
    can request only newer events (since=<last_id_seen>).
  * A simple Lock guards the buffer (uvicorn may serve from worker threads).
  * MAX_EVENTS caps the buffer.
"""
from __future__ import annotations
import logging
from typing import List, Dict, Any
from threading import Lock
from datetime import datetime, timezone

from .Event_Bus import (
    GLOBAL_EVENT_BUS, STORAGE_FULL, STORAGE_CORRUPT, STORAGE_TOO_LARGE, PLAN_PARTIAL_REPLACE
)

logger = logging.getLogger(__name__)

_lock = Lock()
_events: List[Dict[str, Any]] = []
_next_id = 1
MAX_EVENTS = 300  # keep a few hundred recent events
_started = False

_MESSAGES = {
    STORAGE_FULL: "Storage full! Delete some recipes first.",
    STORAGE_CORRUPT: "Saved data could not be read. Starting fresh!",
    STORAGE_TOO_LARGE: "Recipe data was too large. Starting fresh! Please re-add your recipes.",
    PLAN_PARTIAL_REPLACE: "Applying the suggested plan failed midway; the meal plan may be empty.",
}


def _record(event_name: str, payload: Any):  # signature expected by EventBus
    global _next_id
    with _lock:
        evt = {
            'id': _next_id,
            'type': event_name,
            'message': _MESSAGES.get(event_name, event_name),
            'ts': datetime.now(timezone.utc).isoformat()
        }
        if isinstance(payload, dict):
            for k in ('key', 'size', 'limit', 'error'):
                if k in payload:
                    evt[k] = payload[k]
        _events.append(evt)
        _next_id += 1
        # Trim buffer
        if len(_events) > MAX_EVENTS:
            del _events[: len(_events) - MAX_EVENTS]


def start():
    """Idempotent start: subscribe observers once."""
    global _started
    if _started:
        return
    for name in (STORAGE_FULL, STORAGE_CORRUPT, STORAGE_TOO_LARGE, PLAN_PARTIAL_REPLACE):
        GLOBAL_EVENT_BUS.subscribe(name, _record)
    _started = True
    logger.debug("Storage event observers subscribed")


def get_events(since: int | None = None) -> Dict[str, Any]:
    """Return events newer than 'since' (exclusive).

    If since is None, returns the last N (up to MAX_EVENTS) events.
    Response includes next_cursor (largest id) so client can poll with since=next_cursor.
    """
    with _lock:
        if since is None:
            data = list(_events)
        else:
            data = [e for e in _events if e['id'] > since]
        next_cursor = _events[-1]['id'] if _events else since or 0
    return {'events': data, 'next_cursor': next_cursor}


__all__ = ['start', 'get_events']
