"""Storage Backend interface shared by the local cache and the remote store."""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from recipebook.domain.Errors import PartialReplaceError, StorageError, StorageWarning
from recipebook.domain.Recipe import Recipe

logger = logging.getLogger(__name__)


class StorageBackend(ABC):
    """Async get/set/delete over the two collections: recipes and meal_plans.

    Recipes travel as plain dicts (see Recipe.to_dict / Recipe.from_dict);
    meal plan entries as rows {day, meal, recipe_id, title}.
    Implementations raise StorageError subclasses on failure.
    """

    #: maximum number of recipes list() hands out; None means unbounded
    list_limit: Optional[int] = None

    def __init__(self):
        self._warnings: List[StorageWarning] = []

    def dump_recipe(self, recipe: Recipe) -> Dict[str, Any]:
        """Record format this backend stores; local cache uses camelCase keys."""
        return recipe.to_dict()

    def pop_warnings(self) -> List[StorageWarning]:
        """Return and forget warnings collected since the last call."""
        warnings, self._warnings = self._warnings, []
        return warnings

    async def aclose(self) -> None:
        """Release connections held by the backend; the local cache holds none."""

    # --- recipes ---
    @abstractmethod
    async def get_all_recipes(self) -> List[Dict[str, Any]]: ...

    @abstractmethod
    async def get_recipe(self, recipe_id: str) -> Optional[Dict[str, Any]]: ...

    @abstractmethod
    async def insert_recipe(self, data: Dict[str, Any]) -> Dict[str, Any]: ...

    @abstractmethod
    async def update_recipe(self, recipe_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]: ...

    @abstractmethod
    async def delete_recipe(self, recipe_id: str) -> None: ...

    # --- meal plans ---
    @abstractmethod
    async def get_all_meal_plans(self) -> List[Dict[str, Any]]: ...

    @abstractmethod
    async def upsert_meal_plan(self, day: str, meal: str, recipe_id: str, title: Optional[str] = None) -> None: ...

    @abstractmethod
    async def delete_meal_plan(self, day: str, meal: str) -> None: ...

    @abstractmethod
    async def delete_all_meal_plans(self) -> None: ...

    @abstractmethod
    async def insert_meal_plans(self, rows: List[Dict[str, Any]]) -> None: ...

    async def replace_meal_plans(self, rows: List[Dict[str, Any]]) -> None:
        """Bulk replace: delete every entry, then insert `rows`.

        A failure while deleting propagates unchanged (the old plan is intact).
        A failure while inserting raises PartialReplaceError: the plan may now be empty.
        """
        await self.delete_all_meal_plans()
        if not rows:
            return
        try:
            await self.insert_meal_plans(rows)
        except StorageError as e:
            logger.error("Bulk insert of %d meal plan entries failed after delete: %s", len(rows), e)
            raise PartialReplaceError(e) from e
