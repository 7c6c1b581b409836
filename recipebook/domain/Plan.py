"""Plan domain entity: weekly 7 x 3 grid of optional recipe references."""
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from recipebook.utilities.constants import DAYS, MEALS


class RecipeRef:
    """Reference to a Recipe id, optionally denormalized with its title for display."""

    def __init__(self, id: str, title: Optional[str] = None):
        self.id = str(id)
        self.title = title

    def __eq__(self, other) -> bool:
        if not isinstance(other, RecipeRef):
            return NotImplemented
        return self.id == other.id and self.title == other.title

    def __repr__(self) -> str:
        return f"RecipeRef({self.id!r}, {self.title!r})"

    @staticmethod
    def coerce(value: Any) -> Optional["RecipeRef"]:
        """Accept a bare id, an {id, title} mapping, a RecipeRef or a placeholder."""
        if value is None or value in ("", "-"):
            return None
        if isinstance(value, RecipeRef):
            return value
        if isinstance(value, Mapping):
            ref_id = value.get("id") or value.get("recipe_id") or value.get("recipeId")
            if not ref_id:
                return None
            return RecipeRef(ref_id, value.get("title"))
        return RecipeRef(value)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "title": self.title}


def is_valid_slot(day: Any, meal: Any) -> bool:
    return day in DAYS and meal in MEALS


class MealPlan:
    def __init__(self, slots: Optional[Dict[str, Dict[str, Optional[RecipeRef]]]] = None):
        self.slots: Dict[str, Dict[str, Optional[RecipeRef]]] = {day: {meal: None for meal in MEALS} for day in DAYS}
        for day, meals in (slots or {}).items():
            for meal, ref in meals.items():
                self.set(day, meal, ref)

    @classmethod
    def empty(cls) -> "MealPlan":
        return cls()

    def __eq__(self, other) -> bool:
        if not isinstance(other, MealPlan):
            return NotImplemented
        return self.slots == other.slots

    def __iter__(self) -> Iterator[Tuple[str, str, Optional[RecipeRef]]]:
        for day in DAYS:
            for meal in MEALS:
                yield day, meal, self.slots[day][meal]

    def get(self, day: str, meal: str) -> Optional[RecipeRef]:
        return self.slots[day][meal]

    def set(self, day: str, meal: str, ref: Any) -> None:
        if not is_valid_slot(day, meal):
            raise KeyError(f"Invalid slot: {day}/{meal}")
        self.slots[day][meal] = RecipeRef.coerce(ref)

    def clear(self, day: str, meal: str) -> None:
        self.set(day, meal, None)

    def filled_slots(self) -> List[Tuple[str, str, RecipeRef]]:
        return [(day, meal, ref) for day, meal, ref in self if ref is not None]

    def is_empty(self) -> bool:
        return not self.filled_slots()

    # --- local cache format ---
    @classmethod
    def from_grid(cls, grid: Optional[Mapping[str, Any]]) -> "MealPlan":
        """Read the cached {day: {meal: id | {id, title} | null}} mapping.

        Unknown days/meals are dropped; missing ones default to empty.
        """
        plan = cls()
        for day, meals in (grid or {}).items():
            if day not in DAYS or not isinstance(meals, Mapping):
                continue
            for meal, value in meals.items():
                if meal in MEALS:
                    plan.set(day, meal, value)
        return plan

    def to_grid(self) -> Dict[str, Dict[str, Optional[Dict[str, Any]]]]:
        return {day: {meal: (ref.to_dict() if ref else None) for meal, ref in meals.items()}
                for day, meals in self.slots.items()}

    # --- remote `meal_plans` rows ---
    @classmethod
    def from_rows(cls, rows: Iterable[Mapping[str, Any]]) -> "MealPlan":
        plan = cls()
        for row in rows:
            day, meal = row.get("day"), row.get("meal")
            if is_valid_slot(day, meal):
                plan.set(day, meal, {"id": row.get("recipe_id"), "title": row.get("title")})
        return plan

    def to_rows(self) -> List[Dict[str, Any]]:
        return [{"day": day, "meal": meal, "recipe_id": ref.id, "title": ref.title}
                for day, meal, ref in self.filled_slots()]

    def resolve(self, recipes: Iterable[Any]) -> Dict[str, Dict[str, Any]]:
        """Map every slot to its Recipe; a dangling reference resolves to None."""
        by_id = {r.id: r for r in recipes}
        return {day: {meal: (by_id.get(ref.id) if ref else None) for meal, ref in meals.items()}
                for day, meals in self.slots.items()}
