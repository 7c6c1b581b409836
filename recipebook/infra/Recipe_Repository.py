"""Recipe Repository: the only writer of Recipe entities.

Every public coroutine returns a Result; storage and validation errors are
carried inside it rather than raised. Calls on one repository instance are
serialized by an asyncio.Lock.
"""
import asyncio
import logging
import threading
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Union

from pydantic import BaseModel

from recipebook.domain.Errors import NotFoundError, RecipeBookError
from recipebook.domain.Recipe import Recipe
from recipebook.domain.Result import Result
from recipebook.infra.Storage_Backend import StorageBackend
from recipebook.logic.healthier import derive_healthier_variant
from recipebook.utilities.validators import RecipeDraft, RecipePatch, validate

logger = logging.getLogger(__name__)

DraftLike = Union[Recipe, BaseModel, Mapping[str, Any]]

_id_lock = threading.Lock()
_last_id = 0


def new_recipe_id() -> str:
    """Millisecond-timestamp id, bumped when needed so ids strictly increase within the process."""
    global _last_id
    with _id_lock:
        candidate = int(time.time() * 1000)
        _last_id = candidate if candidate > _last_id else _last_id + 1
        return str(_last_id)


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _as_data(draft: DraftLike) -> Dict[str, Any]:
    if isinstance(draft, Recipe):
        return draft.to_dict()
    if isinstance(draft, BaseModel):
        return draft.model_dump()
    return dict(draft)


class RecipeRepository:
    def __init__(self, backend: StorageBackend, id_factory: Callable[[], str] = new_recipe_id,
                 clock: Callable[[], str] = utc_now):
        self.backend = backend
        self.id_factory = id_factory
        self.clock = clock
        self._lock = asyncio.Lock()

    async def _guarded(self, action: Callable[[], Awaitable[Any]]) -> Result:
        async with self._lock:
            try:
                value = await action()
            except RecipeBookError as e:
                logger.info("Recipe operation failed: %s", e)
                return Result.failure(e, warnings=self.backend.pop_warnings())
            return Result.success(value, warnings=self.backend.pop_warnings())

    # --- unlocked helpers ---
    async def _get(self, recipe_id: str) -> Recipe:
        data = await self.backend.get_recipe(str(recipe_id))
        if data is None:
            raise NotFoundError("Recipe", recipe_id)
        return Recipe.from_dict(data)

    async def _insert(self, draft: DraftLike) -> Recipe:
        fields = validate(RecipeDraft, _as_data(draft)).model_dump()
        now = self.clock()
        recipe = Recipe(id=self.id_factory(), created_at=now, updated_at=now, **fields)
        saved = await self.backend.insert_recipe(self.backend.dump_recipe(recipe))
        logger.info("Created recipe %s (%s)", recipe.id, recipe.title)
        return Recipe.from_dict(saved)

    async def _save(self, recipe: Recipe) -> Recipe:
        saved = await self.backend.update_recipe(recipe.id, self.backend.dump_recipe(recipe))
        if saved is None:
            raise NotFoundError("Recipe", recipe.id)
        return Recipe.from_dict(saved)

    async def _merge(self, recipe_id: str, patch: DraftLike) -> Recipe:
        existing = await self._get(recipe_id)
        changes = validate(RecipePatch, _as_data(patch)).model_dump(exclude_unset=True)
        merged = {name: getattr(existing, name) for name in RecipeDraft.model_fields}
        merged.update(changes)
        fields = validate(RecipeDraft, merged).model_dump()
        return await self._save(existing.copy(updated_at=self.clock(), **fields))

    # --- operations ---
    async def create(self, draft: DraftLike) -> Result:
        """Validate and persist a new recipe; the value is the stored Recipe with its new id."""
        return await self._guarded(lambda: self._insert(draft))

    async def list(self) -> Result:
        """All recipes in backend order, capped at the backend's list limit."""
        async def _list() -> List[Recipe]:
            recipes = [Recipe.from_dict(data) for data in await self.backend.get_all_recipes()]
            limit = self.backend.list_limit
            return recipes[:limit] if limit is not None else recipes
        return await self._guarded(_list)

    async def get_by_id(self, recipe_id: str) -> Result:
        return await self._guarded(lambda: self._get(recipe_id))

    async def update(self, recipe_id: str, patch: DraftLike) -> Result:
        """Merge patch fields into the stored recipe and refresh updated_at."""
        return await self._guarded(lambda: self._merge(recipe_id, patch))

    async def delete(self, recipe_id: str) -> Result:
        """Remove the recipe; deleting a missing id succeeds as well."""
        async def _delete() -> None:
            await self.backend.delete_recipe(str(recipe_id))
            logger.info("Deleted recipe %s", recipe_id)
        return await self._guarded(_delete)

    async def toggle_favorite(self, recipe_id: str) -> Result:
        async def _toggle() -> Recipe:
            existing = await self._get(recipe_id)
            return await self._save(existing.copy(favorite=not existing.favorite, updated_at=self.clock()))
        return await self._guarded(_toggle)

    def derive_healthier_variant(self, recipe: Recipe) -> Recipe:
        """Healthier copy of `recipe` with a fresh id; nothing is persisted."""
        return derive_healthier_variant(recipe, self.id_factory())

    async def save_healthier_variant(self, original_id: str, variant: Recipe, replace: bool = False) -> Result:
        """Store a derived variant as a new recipe, or in place of the original (keeping its id)."""
        async def _save_variant() -> Recipe:
            if not replace:
                return await self._insert(variant)
            original = await self._get(original_id)
            fields = validate(RecipeDraft, _as_data(variant)).model_dump()
            replacement = original.copy(updated_at=self.clock(), **fields)
            return await self._save(replacement)
        return await self._guarded(_save_variant)
