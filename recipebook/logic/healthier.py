"""Rule-based "healthier version" transform: ingredient and instruction swaps."""
from __future__ import annotations

import re
from typing import Iterable, List, Tuple

from recipebook.domain.Recipe import Recipe
from recipebook.utilities.constants import (
    HEALTHY_DESCRIPTION, HEALTHY_TITLE_SUFFIX, INGREDIENT_SWAPS, INSTRUCTION_SWAPS
)


def swap_line(line: str, rules: Iterable[Tuple[str, str]]) -> str:
    """Apply the first rule whose term occurs in `line` (case-insensitive), replacing every occurrence."""
    lowered = line.lower()
    for term, replacement in rules:
        if term in lowered:
            return re.sub(re.escape(term), replacement, line, flags=re.IGNORECASE)
    return line


def swap_lines(lines: Iterable[str], rules: Iterable[Tuple[str, str]]) -> List[str]:
    rules = tuple(rules)
    return [swap_line(line, rules) for line in lines]


def derive_healthier_variant(recipe: Recipe, new_id: str) -> Recipe:
    """Return a new Recipe with swapped ingredients/instructions; `recipe` is left untouched."""
    return recipe.copy(
        id=new_id,
        title=recipe.title + HEALTHY_TITLE_SUFFIX,
        description=HEALTHY_DESCRIPTION,
        ingredients=swap_lines(recipe.ingredients, INGREDIENT_SWAPS),
        instructions=swap_lines(recipe.instructions, INSTRUCTION_SWAPS),
    )
