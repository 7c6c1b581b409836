from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from recipebook.api.dependencies import get_recipe_repository
from recipebook.api.responses import error_response, success
from recipebook.domain.Errors import ValidationError
from recipebook.domain.Result import Result
from recipebook.infra.Recipe_Repository import RecipeRepository
from recipebook.logic.list_view import RecipeBookView, ViewQuery, list_sources
from recipebook.utilities.constants import ALL_SOURCES, DEFAULT_SORT

router = APIRouter(prefix="/api/recipes", tags=["recipes"])

HEALTHIER_MODES = ("preview", "new", "replace")


@router.get("")
async def list_recipes(
    search: Optional[str] = Query(default=None),
    source: str = Query(default=ALL_SOURCES),
    favorites: bool = Query(default=False),
    sort: str = Query(default=DEFAULT_SORT),
    repo: RecipeRepository = Depends(get_recipe_repository),
):
    """Recipes after search / source / favorites filtering, sorted last."""
    result = await repo.list()
    if not result.ok:
        return error_response(result)
    view = RecipeBookView(result.value, ViewQuery(search=search, source=source, favorites_only=favorites, sort=sort))
    visible = view.visible()
    return success(result, count=len(visible), total=view.total, recipes=[r.to_dict() for r in visible])


@router.get("/sources")
async def recipe_sources(repo: RecipeRepository = Depends(get_recipe_repository)):
    result = await repo.list()
    if not result.ok:
        return error_response(result)
    return success(result, sources=list_sources(result.value))


@router.post("")
async def create_recipe(data: Dict[str, Any] = Body(...), repo: RecipeRepository = Depends(get_recipe_repository)):
    result = await repo.create(data)
    if not result.ok:
        return error_response(result)
    return success(result, recipe=result.value.to_dict())


@router.get("/{recipe_id}")
async def get_recipe(recipe_id: str, repo: RecipeRepository = Depends(get_recipe_repository)):
    result = await repo.get_by_id(recipe_id)
    if not result.ok:
        return error_response(result)
    return success(result, recipe=result.value.to_dict())


@router.patch("/{recipe_id}")
async def update_recipe(recipe_id: str, patch: Dict[str, Any] = Body(...),
                        repo: RecipeRepository = Depends(get_recipe_repository)):
    result = await repo.update(recipe_id, patch)
    if not result.ok:
        return error_response(result)
    return success(result, recipe=result.value.to_dict())


@router.delete("/{recipe_id}")
async def delete_recipe(recipe_id: str, repo: RecipeRepository = Depends(get_recipe_repository)):
    result = await repo.delete(recipe_id)
    if not result.ok:
        return error_response(result)
    return success(result, deleted=recipe_id)


@router.post("/{recipe_id}/favorite")
async def toggle_favorite(recipe_id: str, repo: RecipeRepository = Depends(get_recipe_repository)):
    result = await repo.toggle_favorite(recipe_id)
    if not result.ok:
        return error_response(result)
    return success(result, recipe=result.value.to_dict())


@router.post("/{recipe_id}/healthier")
async def healthier_version(recipe_id: str, mode: str = Query(default="preview"),
                            repo: RecipeRepository = Depends(get_recipe_repository)):
    """Preview a healthier variant, or save it as a new recipe / in place of the original."""
    if mode not in HEALTHIER_MODES:
        return error_response(Result.failure(ValidationError(f"Invalid mode: {mode}", field="mode")))
    found = await repo.get_by_id(recipe_id)
    if not found.ok:
        return error_response(found)
    original = found.value
    variant = repo.derive_healthier_variant(original)
    if mode == "preview":
        return success(found, original=original.to_dict(), healthier=variant.to_dict())
    saved = await repo.save_healthier_variant(original.id, variant, replace=(mode == "replace"))
    if not saved.ok:
        return error_response(saved)
    return success(saved, recipe=saved.value.to_dict())
