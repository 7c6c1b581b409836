import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional, Union

from recipebook.domain.Errors import PartialReplaceError, RecipeBookError, ValidationError
from recipebook.domain.Plan import MealPlan
from recipebook.domain.Recipe import Recipe
from recipebook.domain.Result import Result
from recipebook.events.Event_Bus import EventBus
from recipebook.events.event_helpers import publish_partial_replace
from recipebook.infra.Storage_Backend import StorageBackend
from recipebook.logic.suggestions import SuggestionGenerator, generate_suggestions
from recipebook.utilities.constants import DAYS, MEALS
from recipebook.utilities.validators import SlotAssignment, SlotInput, validate

logger = logging.getLogger(__name__)

CandidatePlan = Union[MealPlan, Mapping[str, Any]]


def _candidate_plan(candidate: CandidatePlan) -> MealPlan:
    """Accept a MealPlan or a {day: {meal: ref}} mapping whose keys are all valid slots."""
    if isinstance(candidate, MealPlan):
        return candidate
    if not isinstance(candidate, Mapping):
        raise ValidationError("Suggested plan must be a mapping of days to meals")
    for day, meals in candidate.items():
        if day not in DAYS:
            raise ValidationError(f"Invalid day: {day}", field="day")
        if meals is None:
            continue
        if not isinstance(meals, Mapping):
            raise ValidationError(f"Meals for {day} must be a mapping", field=day)
        for meal in meals:
            if meal not in MEALS:
                raise ValidationError(f"Invalid meal: {meal}", field="meal")
    return MealPlan.from_grid(candidate)


class MealPlanRepository:
    """Weekly 7 x 3 plan of recipe references.

    Holds ids only; recipes are looked up lazily and a reference to a deleted
    recipe reads as an empty slot. Calls are serialized by an asyncio.Lock so
    a bulk replace never interleaves with a single-slot write.
    """

    def __init__(self, backend: StorageBackend, bus: Optional[EventBus] = None):
        self.backend = backend
        self.bus = bus
        self._lock = asyncio.Lock()

    async def _guarded(self, action: Callable[[], Awaitable[Any]]) -> Result:
        async with self._lock:
            try:
                value = await action()
            except PartialReplaceError as e:
                logger.error("Meal plan bulk replace left the plan partially applied: %s", e)
                publish_partial_replace(e, bus=self.bus)
                return Result.failure(e, warnings=self.backend.pop_warnings())
            except RecipeBookError as e:
                logger.info("Meal plan operation failed: %s", e)
                return Result.failure(e, warnings=self.backend.pop_warnings())
            return Result.success(value, warnings=self.backend.pop_warnings())

    async def _plan(self) -> MealPlan:
        return MealPlan.from_rows(await self.backend.get_all_meal_plans())

    async def _recipes(self):
        return [Recipe.from_dict(data) for data in await self.backend.get_all_recipes()]

    async def get_plan(self) -> Result:
        """Full grid; unset slots are None."""
        return await self._guarded(self._plan)

    async def resolved_plan(self) -> Result:
        """{day: {meal: Recipe | None}}; dangling references resolve to None."""
        async def _resolve() -> Dict[str, Dict[str, Optional[Recipe]]]:
            plan = await self._plan()
            return plan.resolve(await self._recipes())
        return await self._guarded(_resolve)

    async def assign(self, day: str, meal: str, recipe_id: str) -> Result:
        """Put `recipe_id` in the slot, replacing whatever was there."""
        async def _assign() -> MealPlan:
            slot = validate(SlotAssignment, {"day": day, "meal": meal, "recipe_id": recipe_id})
            recipe = await self.backend.get_recipe(slot.recipe_id)
            title = Recipe.from_dict(recipe).title if recipe else None
            await self.backend.upsert_meal_plan(slot.day, slot.meal, slot.recipe_id, title)
            logger.debug("Assigned recipe %s to %s %s", slot.recipe_id, slot.day, slot.meal)
            return await self._plan()
        return await self._guarded(_assign)

    async def remove(self, day: str, meal: str) -> Result:
        async def _remove() -> MealPlan:
            slot = validate(SlotInput, {"day": day, "meal": meal})
            await self.backend.delete_meal_plan(slot.day, slot.meal)
            return await self._plan()
        return await self._guarded(_remove)

    async def clear_week(self) -> Result:
        async def _clear() -> MealPlan:
            await self.backend.delete_all_meal_plans()
            logger.info("Cleared the weekly meal plan")
            return MealPlan.empty()
        return await self._guarded(_clear)

    async def apply_suggestion(self, candidate: CandidatePlan) -> Result:
        """Discard the current plan and store `candidate` in its place as one logical operation."""
        async def _apply() -> MealPlan:
            plan = _candidate_plan(candidate)
            await self.backend.replace_meal_plans(plan.to_rows())
            logger.info("Applied suggested plan with %d filled slots", len(plan.filled_slots()))
            return plan
        return await self._guarded(_apply)

    async def suggest(self, generator: SuggestionGenerator = generate_suggestions) -> Result:
        """Candidate plan from the current recipes; nothing is stored."""
        async def _suggest() -> MealPlan:
            return generator(await self._recipes())
        return await self._guarded(_suggest)
