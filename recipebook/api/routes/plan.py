from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query

from recipebook.api.dependencies import get_plan_repository, get_recipe_repository
from recipebook.api.responses import error_response, success
from recipebook.infra.Plan_Repository import MealPlanRepository
from recipebook.infra.Recipe_Repository import RecipeRepository
from recipebook.logic.list_view import pick_recipes

router = APIRouter(prefix="/api/meal-plan", tags=["meal-plan"])


@router.get("")
async def get_meal_plan(repo: MealPlanRepository = Depends(get_plan_repository)):
    """Resolved week: every slot is {id, title} or null (a deleted recipe shows as null)."""
    result = await repo.resolved_plan()
    if not result.ok:
        return error_response(result)
    plan = {day: {meal: ({"id": r.id, "title": r.title} if r else None) for meal, r in meals.items()}
            for day, meals in result.value.items()}
    return success(result, plan=plan)


@router.get("/picker")
async def recipe_picker(search: Optional[str] = Query(default=None),
                        recipes: RecipeRepository = Depends(get_recipe_repository)):
    """Title search for the add-to-slot picker (first 30 matches)."""
    result = await recipes.list()
    if not result.ok:
        return error_response(result)
    shown, total = pick_recipes(result.value, search)
    return success(result, total=total, recipes=[{"id": r.id, "title": r.title, "source": r.source} for r in shown])


@router.put("/{day}/{meal}")
async def assign_meal(day: str, meal: str, data: Dict[str, Any] = Body(...),
                      repo: MealPlanRepository = Depends(get_plan_repository)):
    result = await repo.assign(day, meal, data.get("recipe_id"))
    if not result.ok:
        return error_response(result)
    return success(result, plan=result.value.to_grid())


@router.delete("/{day}/{meal}")
async def remove_meal(day: str, meal: str, repo: MealPlanRepository = Depends(get_plan_repository)):
    result = await repo.remove(day, meal)
    if not result.ok:
        return error_response(result)
    return success(result, plan=result.value.to_grid())


@router.delete("")
async def clear_week(repo: MealPlanRepository = Depends(get_plan_repository)):
    result = await repo.clear_week()
    if not result.ok:
        return error_response(result)
    return success(result, plan=result.value.to_grid())


@router.post("/suggestions")
async def suggest_plan(repo: MealPlanRepository = Depends(get_plan_repository)):
    """Generate a balanced week from saved recipes without applying it."""
    result = await repo.suggest()
    if not result.ok:
        return error_response(result)
    plan = result.value
    return success(result, filled=len(plan.filled_slots()), plan=plan.to_grid())


@router.post("/apply")
async def apply_plan(candidate: Dict[str, Any] = Body(...), repo: MealPlanRepository = Depends(get_plan_repository)):
    """Replace the whole week with a suggested plan."""
    result = await repo.apply_suggestion(candidate)
    if not result.ok:
        return error_response(result)
    return success(result, plan=result.value.to_grid())
