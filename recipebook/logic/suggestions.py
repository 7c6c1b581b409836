"""Suggestion Generator: random weekly meal plan drawn from the saved recipes."""
from __future__ import annotations

import random
from typing import Callable, Optional, Sequence

from recipebook.domain.Plan import MealPlan, RecipeRef
from recipebook.domain.Recipe import Recipe
from recipebook.utilities.constants import DAYS, MEALS

SuggestionGenerator = Callable[[Sequence[Recipe]], MealPlan]


def generate_suggestions(recipes: Sequence[Recipe], rng: Optional[random.Random] = None) -> MealPlan:
    """Fill every slot with a random recipe, drawing without replacement.

    When the pool runs dry it is refilled with the full list, so a non-empty
    collection always covers all 21 slots. An empty collection gives an empty plan.
    """
    rng = rng or random
    plan = MealPlan.empty()
    pool = list(recipes)
    if not pool:
        return plan
    for day in DAYS:
        for meal in MEALS:
            recipe = pool.pop(rng.randrange(len(pool)))
            plan.set(day, meal, RecipeRef(recipe.id, recipe.title))
            if not pool:
                pool = list(recipes)
    return plan
