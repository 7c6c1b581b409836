"""Storage backend over a remote Supabase / PostgREST service.

Tables:
  recipes     - columns mirroring Recipe.to_row() (created_at / updated_at included)
  meal_plans  - id, day, meal, recipe_id (unique on day + meal), created_at
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from recipebook.domain.Errors import BackendError
from recipebook.domain.Recipe import Recipe
from recipebook.infra.Storage_Backend import StorageBackend

logger = logging.getLogger(__name__)

RECIPES_TABLE = "recipes"
MEAL_PLANS_TABLE = "meal_plans"
# PostgREST refuses an unfiltered DELETE; this never matches a real row id
_NIL_UUID = "00000000-0000-0000-0000-000000000000"


class RemoteBackend(StorageBackend):
    def __init__(self, base_url: str, api_key: str, client: Optional[httpx.AsyncClient] = None,
                 timeout: float = 10.0):
        super().__init__()
        self.base_url = base_url.rstrip("/")
        headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        self.client = client or httpx.AsyncClient(base_url=f"{self.base_url}/rest/v1", headers=headers,
                                                  timeout=timeout)

    async def aclose(self) -> None:
        await self.client.aclose()

    def dump_recipe(self, recipe: Recipe) -> Dict[str, Any]:
        return recipe.to_row()

    async def _request(self, method: str, table: str, params: Optional[Dict[str, str]] = None,
                       json: Any = None, returning: bool = False) -> Any:
        headers = {"Prefer": "return=representation"} if returning else {}
        try:
            response = await self.client.request(method, f"/{table}", params=params, json=json, headers=headers)
        except httpx.HTTPError as e:
            logger.error("%s /%s failed: %s", method, table, e)
            raise BackendError(f"Request to {table} failed: {e}") from e
        if response.status_code >= 400:
            logger.error("%s /%s returned %d: %s", method, table, response.status_code, response.text)
            raise BackendError(f"{table} request returned {response.status_code}: {response.text}",
                               status_code=response.status_code)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(f"Invalid JSON from {table}: {e}", status_code=response.status_code) from e

    # --- recipes ---
    async def get_all_recipes(self) -> List[Dict[str, Any]]:
        rows = await self._request("GET", RECIPES_TABLE, params={"select": "*", "order": "created_at.desc"})
        return rows or []

    async def get_recipe(self, recipe_id: str) -> Optional[Dict[str, Any]]:
        rows = await self._request("GET", RECIPES_TABLE, params={"select": "*", "id": f"eq.{recipe_id}"})
        return rows[0] if rows else None

    async def insert_recipe(self, data: Dict[str, Any]) -> Dict[str, Any]:
        rows = await self._request("POST", RECIPES_TABLE, json=[data], returning=True)
        return rows[0] if rows else data

    async def update_recipe(self, recipe_id: str, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        rows = await self._request("PATCH", RECIPES_TABLE, params={"id": f"eq.{recipe_id}"}, json=data,
                                   returning=True)
        return rows[0] if rows else None

    async def delete_recipe(self, recipe_id: str) -> None:
        await self._request("DELETE", RECIPES_TABLE, params={"id": f"eq.{recipe_id}"})

    # --- meal plans ---
    async def get_all_meal_plans(self) -> List[Dict[str, Any]]:
        rows = await self._request("GET", MEAL_PLANS_TABLE, params={"select": "*", "order": "created_at.desc"})
        return rows or []

    async def _find_meal_plan(self, day: str, meal: str) -> Optional[Dict[str, Any]]:
        rows = await self._request("GET", MEAL_PLANS_TABLE,
                                   params={"select": "id", "day": f"eq.{day}", "meal": f"eq.{meal}"})
        return rows[0] if rows else None

    async def upsert_meal_plan(self, day: str, meal: str, recipe_id: str, title: Optional[str] = None) -> None:
        existing = await self._find_meal_plan(day, meal)
        if existing:
            await self._request("PATCH", MEAL_PLANS_TABLE, params={"id": f"eq.{existing['id']}"},
                                json={"recipe_id": recipe_id})
        else:
            await self._request("POST", MEAL_PLANS_TABLE, json=[{"day": day, "meal": meal, "recipe_id": recipe_id}])

    async def delete_meal_plan(self, day: str, meal: str) -> None:
        await self._request("DELETE", MEAL_PLANS_TABLE, params={"day": f"eq.{day}", "meal": f"eq.{meal}"})

    async def delete_all_meal_plans(self) -> None:
        await self._request("DELETE", MEAL_PLANS_TABLE, params={"id": f"neq.{_NIL_UUID}"})

    async def insert_meal_plans(self, rows: List[Dict[str, Any]]) -> None:
        payload = [{"day": r["day"], "meal": r["meal"], "recipe_id": r["recipe_id"]} for r in rows]
        await self._request("POST", MEAL_PLANS_TABLE, json=payload)
