"""Storage backend over the local key-value cache, always going through the Local Cache Guard."""
import logging
from typing import Any, Dict, List, Optional

from recipebook.domain.Plan import MealPlan
from recipebook.infra.Cache_Guard import CacheRead, LocalCacheGuard
from recipebook.infra.Storage_Backend import StorageBackend
from recipebook.utilities.constants import LOCAL_LIST_LIMIT

logger = logging.getLogger(__name__)


class LocalBackend(StorageBackend):
    list_limit = LOCAL_LIST_LIMIT

    def __init__(self, guard: LocalCacheGuard):
        super().__init__()
        self.guard = guard

    def _collect(self, read: CacheRead) -> Any:
        if read.warning is not None:
            self._warnings.append(read.warning)
        return read.data

    def _recipes(self) -> List[Dict[str, Any]]:
        return self._collect(self.guard.read_recipes())

    def _plan(self) -> MealPlan:
        return MealPlan.from_grid(self._collect(self.guard.read_meal_plan()))

    # --- recipes ---
    async def get_all_recipes(self) -> List[Dict[str, Any]]:
        return self._recipes()

    async def get_recipe(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        return next((r for r in self._recipes() if str(r.get("id")) == recipe_id), None)

    async def insert_recipe(self, data: Dict[str, Any]) -> Dict[str, Any]:
        recipes = self._recipes()
        recipes.append(data)
        self.guard.write_recipes(recipes)
        return data

    async def update_recipe(self, recipe_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        recipes = self._recipes()
        for index, entry in enumerate(recipes):
            if str(entry.get("id")) == recipe_id:
                recipes[index] = data
                self.guard.write_recipes(recipes)
                return data
        return None

    async def delete_recipe(self, recipe_id: str) -> None:
        recipes = self._recipes()
        remaining = [r for r in recipes if str(r.get("id")) != recipe_id]
        if len(remaining) != len(recipes):
            self.guard.write_recipes(remaining)

    # --- meal plans ---
    async def get_all_meal_plans(self) -> List[Dict[str, Any]]:
        return self._plan().to_rows()

    async def upsert_meal_plan(self, day: str, meal: str, recipe_id: str, title: Optional[str] = None) -> None:
        plan = self._plan()
        plan.set(day, meal, {"id": recipe_id, "title": title})
        self.guard.write_meal_plan(plan.to_grid())

    async def delete_meal_plan(self, day: str, meal: str) -> None:
        plan = self._plan()
        if plan.get(day, meal) is not None:
            plan.clear(day, meal)
            self.guard.write_meal_plan(plan.to_grid())

    async def delete_all_meal_plans(self) -> None:
        self.guard.write_meal_plan(MealPlan.empty().to_grid())

    async def insert_meal_plans(self, rows: List[Dict[str, Any]]) -> None:
        plan = self._plan()
        for row in rows:
            plan.set(row["day"], row["meal"], {"id": row["recipe_id"], "title": row.get("title")})
        self.guard.write_meal_plan(plan.to_grid())

    async def replace_meal_plans(self, rows: List[Dict[str, Any]]) -> None:
        # One write: the cache holds either the old plan or the new one.
        self.guard.write_meal_plan(MealPlan.from_rows(rows).to_grid())
