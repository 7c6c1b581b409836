"""List View Engine: pure filter / sort over an in-memory recipe collection.

Nothing here touches storage and nothing mutates its input; every function
returns a new list. Search, source filter and favorite filter compose by
intersection, and sorting is applied last.
"""
from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from recipebook.domain.Recipe import Recipe
from recipebook.utilities.constants import ALL_SOURCES, DEFAULT_SORT, PICKER_LIMIT


def filter_by_search(recipes: Sequence[Recipe], term: Optional[str]) -> List[Recipe]:
    """Case-insensitive substring match on title, any ingredient or any tag."""
    if not term:
        return list(recipes)
    query = term.lower()
    return [
        r for r in recipes
        if query in (r.title or "").lower()
        or any(query in ing.lower() for ing in r.ingredients)
        or any(query in tag.lower() for tag in r.tags)
    ]


def filter_by_source(recipes: Sequence[Recipe], source: Optional[str]) -> List[Recipe]:
    # "all" is a sentinel, so a real source literally named "all" cannot be selected on its own
    if not source or source == ALL_SOURCES:
        return list(recipes)
    return [r for r in recipes if r.source == source]


def filter_by_favorite(recipes: Sequence[Recipe]) -> List[Recipe]:
    return [r for r in recipes if r.favorite]


def _recency_key(recipe: Recipe) -> Tuple[str, int, str]:
    # ids are creation-timestamp derived; compare numerically when they are numeric
    numeric = int(recipe.id) if recipe.id.isdigit() else 0
    return (recipe.created_at or "", numeric, recipe.id)


def sort_recipes(recipes: Sequence[Recipe], key: Optional[str]) -> List[Recipe]:
    """Stable sort by 'newest', 'oldest', 'name-asc' or 'name-desc'; unknown keys keep the order."""
    if key == "newest":
        return sorted(recipes, key=_recency_key, reverse=True)
    if key == "oldest":
        return sorted(recipes, key=_recency_key)
    if key == "name-asc":
        return sorted(recipes, key=lambda r: r.title or "")
    if key == "name-desc":
        return sorted(recipes, key=lambda r: r.title or "", reverse=True)
    return list(recipes)


class ViewQuery:
    """Current list view parameters (search box, source dropdown, favorites toggle, sort dropdown)."""

    def __init__(self, search: Optional[str] = None, source: str = ALL_SOURCES, favorites_only: bool = False,
                 sort: str = DEFAULT_SORT):
        self.search = search
        self.source = source
        self.favorites_only = favorites_only
        self.sort = sort

    def __repr__(self) -> str:
        return (f"ViewQuery(search={self.search!r}, source={self.source!r}, "
                f"favorites_only={self.favorites_only!r}, sort={self.sort!r})")


def apply_view(recipes: Sequence[Recipe], query: Optional[ViewQuery] = None) -> List[Recipe]:
    query = query or ViewQuery()
    result = filter_by_search(recipes, query.search)
    result = filter_by_source(result, query.source)
    if query.favorites_only:
        result = filter_by_favorite(result)
    return sort_recipes(result, query.sort)


def list_sources(recipes: Sequence[Recipe]) -> List[str]:
    """Distinct sources in first-seen order, for the source dropdown."""
    return list(dict.fromkeys(r.source for r in recipes))


def pick_recipes(recipes: Sequence[Recipe], term: Optional[str] = None,
                 limit: int = PICKER_LIMIT) -> Tuple[List[Recipe], int]:
    """Slot picker search: title-only match, first `limit` hits plus the total hit count."""
    if term:
        query = term.lower()
        matches = [r for r in recipes if query in (r.title or "").lower()]
    else:
        matches = list(recipes)
    return matches[:limit], len(matches)


class RecipeBookView:
    """Session object owning the loaded collection and the active query.

    The repository hands the collection in; the view never reads storage itself.
    """

    def __init__(self, recipes: Optional[Sequence[Recipe]] = None, query: Optional[ViewQuery] = None):
        self.recipes: List[Recipe] = list(recipes or [])
        self.query = query or ViewQuery()

    def load(self, recipes: Sequence[Recipe]) -> None:
        self.recipes = list(recipes)

    def visible(self) -> List[Recipe]:
        return apply_view(self.recipes, self.query)

    def clear_filters(self) -> None:
        self.query = ViewQuery(search=self.query.search)

    @property
    def total(self) -> int:
        return len(self.recipes)
