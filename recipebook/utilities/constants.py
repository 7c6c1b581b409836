from typing import Final

DAYS: Final[tuple[str, ...]] = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
MEALS: Final[tuple[str, ...]] = ("breakfast", "lunch", "dinner")

# Local cache keys
RECIPES_KEY: Final[str] = "recipes"
MEAL_PLAN_KEY: Final[str] = "mealPlan"

MAX_CACHE_BYTES: Final[int] = 4_000_000
HEAVY_FIELDS: Final[tuple[str, ...]] = ("thumbnailUrl", "image")
LOCAL_LIST_LIMIT: Final[int] = 100
PICKER_LIMIT: Final[int] = 30

DEFAULT_SOURCE: Final[str] = "manual"
ALL_SOURCES: Final[str] = "all"
SORT_KEYS: Final[tuple[str, ...]] = ("newest", "oldest", "name-asc", "name-desc")
DEFAULT_SORT: Final[str] = "newest"

# Ordered: the first rule that matches a line is the only one applied to it.
INGREDIENT_SWAPS: Final[tuple[tuple[str, str], ...]] = (
    ("pasta", "zucchini noodles"),
    ("rice", "cauliflower rice"),
    ("burger bun", "lettuce wrap"),
    ("fried", "baked"),
    ("butter", "olive oil"),
    ("sugar", "honey (reduced amount)"),
)
INSTRUCTION_SWAPS: Final[tuple[tuple[str, str], ...]] = (
    ("fry", "bake or grill"),
)
HEALTHY_TITLE_SUFFIX: Final[str] = " (Healthy Version)"
HEALTHY_DESCRIPTION: Final[str] = "Healthier version with smart ingredient swaps"
