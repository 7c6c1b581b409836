"""Event helper utilities.

Helpers for publishing storage-related events on an event bus
(the global one unless a bus is passed in).

Quick import:
    from recipebook.events.event_helpers import (
        publish_storage_full, publish_storage_reset, publish_partial_replace
    )

"""
from __future__ import annotations
from typing import Optional
from .Event_Bus import (
    EventBus, GLOBAL_EVENT_BUS,
    STORAGE_FULL, STORAGE_CORRUPT, STORAGE_TOO_LARGE, PLAN_PARTIAL_REPLACE
)

__all__ = [
    'publish_storage_full', 'publish_storage_reset', 'publish_partial_replace',
    'STORAGE_FULL', 'STORAGE_CORRUPT', 'STORAGE_TOO_LARGE', 'PLAN_PARTIAL_REPLACE'
]


def publish_storage_full(key: str, size: Optional[int], limit: int, bus: Optional[EventBus] = None):
    """Publish a storage.full event (write rejected, old data kept)."""
    (bus or GLOBAL_EVENT_BUS).publish(STORAGE_FULL, {
        'key': key,
        'size': size,
        'limit': limit
    })


def publish_storage_reset(event_name: str, key: str, bus: Optional[EventBus] = None, **details):
    """Publish a storage.corrupt or storage.too_large event (cache reset to empty)."""
    payload = {'key': key}
    payload.update(details)
    (bus or GLOBAL_EVENT_BUS).publish(event_name, payload)


def publish_partial_replace(error: Exception, bus: Optional[EventBus] = None):
    """Publish a plan.partial_replace event."""
    (bus or GLOBAL_EVENT_BUS).publish(PLAN_PARTIAL_REPLACE, {'error': str(error)})
