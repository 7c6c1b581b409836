"""Local Cache Guard: the only writer of the local key-value store.

Every recipe write goes strip -> serialize -> size check -> commit; a rejected
write leaves the stored data byte-identical. Reads never raise: oversize or
malformed data is cleared and reported as a warning next to an empty result.
"""
import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from recipebook.domain.Errors import StorageCorruptWarning, StorageFullError, StorageTooLargeWarning, StorageWarning
from recipebook.domain.Recipe import Recipe
from recipebook.events.Event_Bus import EventBus, STORAGE_CORRUPT, STORAGE_TOO_LARGE
from recipebook.events.event_helpers import publish_storage_full, publish_storage_reset
from recipebook.utilities.constants import HEAVY_FIELDS, MAX_CACHE_BYTES, MEAL_PLAN_KEY, RECIPES_KEY
from recipebook.utilities.validators import CachedRecipe, first_error

logger = logging.getLogger(__name__)


class CacheRead:
    """Outcome of a guarded read: the data plus the self-heal warning, if any."""

    def __init__(self, data: Any, warning: Optional[StorageWarning] = None):
        self.data = data
        self.warning = warning


def _size(text: str) -> int:
    return len(text.encode("utf-8"))


class LocalCacheGuard:
    def __init__(self, store, max_bytes: int = MAX_CACHE_BYTES, bus: Optional[EventBus] = None):
        self.store = store
        self.max_bytes = max_bytes
        self.bus = bus

    # --- recipes ---
    def write_recipes(self, recipes: List[Dict[str, Any]]) -> None:
        cleaned = [Recipe.strip_heavy_fields(entry) for entry in recipes]
        data = json.dumps(cleaned, ensure_ascii=False)
        size = _size(data)
        if size > self.max_bytes:
            logger.warning("Refusing to write %d recipes: %d bytes exceeds budget of %d", len(cleaned), size,
                           self.max_bytes)
            publish_storage_full(RECIPES_KEY, size, self.max_bytes, bus=self.bus)
            raise StorageFullError(size=size, limit=self.max_bytes)
        if not self.store.set(RECIPES_KEY, data):
            logger.warning("Local store refused recipes write (%d bytes)", size)
            publish_storage_full(RECIPES_KEY, size, self.max_bytes, bus=self.bus)
            raise StorageFullError("Failed to save. Storage may be full.", size=size, limit=self.max_bytes)

    def read_recipes(self) -> CacheRead:
        raw = self.store.get(RECIPES_KEY)
        if not raw:
            return CacheRead([])
        size = _size(raw)
        if size > self.max_bytes:
            return self._reset(RECIPES_KEY, [], StorageTooLargeWarning(
                f"Recipe data too large ({size} bytes) - cleared for safety"), STORAGE_TOO_LARGE,
                size=size, limit=self.max_bytes)
        try:
            entries = json.loads(raw)
        except ValueError as e:
            return self._reset(RECIPES_KEY, [], StorageCorruptWarning(f"Recipe data could not be parsed: {e}"),
                               STORAGE_CORRUPT, error=str(e))
        if not isinstance(entries, list) or not all(isinstance(entry, dict) for entry in entries):
            return self._reset(RECIPES_KEY, [], StorageCorruptWarning("Recipe data is not a list of recipes"),
                               STORAGE_CORRUPT, error="unexpected shape")
        try:
            for entry in entries:
                CachedRecipe.model_validate(entry)
        except PydanticValidationError as e:
            reason = first_error(e)
            return self._reset(RECIPES_KEY, [], StorageCorruptWarning(f"Recipe data is malformed: {reason}"),
                               STORAGE_CORRUPT, error=str(reason))

        if any(field in entry for entry in entries for field in HEAVY_FIELDS):
            entries = [Recipe.strip_heavy_fields(entry) for entry in entries]
            # Save cleaned version back; a refusal here only means the old copy stays
            if not self.store.set(RECIPES_KEY, json.dumps(entries, ensure_ascii=False)):
                logger.warning("Could not write back recipes without image data")
        return CacheRead(entries)

    # --- meal plan ---
    def write_meal_plan(self, grid: Dict[str, Any]) -> None:
        data = json.dumps(grid, ensure_ascii=False)
        if not self.store.set(MEAL_PLAN_KEY, data):
            logger.warning("Local store refused meal plan write (%d bytes)", _size(data))
            publish_storage_full(MEAL_PLAN_KEY, _size(data), self.max_bytes, bus=self.bus)
            raise StorageFullError("Failed to save meal plan. Storage may be full.", size=_size(data),
                                   limit=self.max_bytes)

    def read_meal_plan(self) -> CacheRead:
        raw = self.store.get(MEAL_PLAN_KEY)
        if not raw:
            return CacheRead({})
        try:
            grid = json.loads(raw)
        except ValueError as e:
            return self._reset(MEAL_PLAN_KEY, {}, StorageCorruptWarning(f"Meal plan could not be parsed: {e}"),
                               STORAGE_CORRUPT, error=str(e))
        if not isinstance(grid, dict):
            return self._reset(MEAL_PLAN_KEY, {}, StorageCorruptWarning("Meal plan is not a day mapping"),
                               STORAGE_CORRUPT, error="unexpected shape")
        return CacheRead(grid)

    def _reset(self, key: str, empty: Any, warning: StorageWarning, event_name: str, **details) -> CacheRead:
        logger.warning("Clearing local %r cache: %s", key, warning)
        self.store.remove(key)
        publish_storage_reset(event_name, key, bus=self.bus, **details)
        return CacheRead(empty, warning)
