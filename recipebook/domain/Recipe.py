"""Recipe domain entity: title, timings, ingredients, instructions, tags, source and favorite flag."""
from typing import Any, Dict, Iterable, List, Optional

from recipebook.utilities.constants import DEFAULT_SOURCE, HEAVY_FIELDS

# attribute name -> (cache key, remote column)
_FIELD_KEYS = {
    "id": ("id", "id"),
    "title": ("title", "title"),
    "description": ("description", "description"),
    "prep_time": ("prepTime", "prep_time"),
    "cook_time": ("cookTime", "cook_time"),
    "servings": ("servings", "servings"),
    "ingredients": ("ingredients", "ingredients"),
    "instructions": ("instructions", "instructions"),
    "tags": ("tags", "tags"),
    "source": ("source", "source"),
    "source_url": ("sourceUrl", "source_url"),
    "favorite": ("favorite", "favorite"),
    "notes": ("notes", "notes"),
    "created_at": ("createdAt", "created_at"),
    "updated_at": ("updatedAt", "updated_at"),
}


def _unique(items: Iterable[str]) -> List[str]:
    seen = set()
    out = []
    for item in items:
        if item not in seen:
            seen.add(item)
            out.append(item)
    return out


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


class Recipe:
    def __init__(self, id: str = "", title: str = "", description: str = "", prep_time: int = 0,
                 cook_time: int = 0, servings: int = 1, ingredients: Optional[List[str]] = None,
                 instructions: Optional[List[str]] = None, tags: Optional[Iterable[str]] = None,
                 source: str = DEFAULT_SOURCE, source_url: Optional[str] = None, favorite: bool = False,
                 notes: Optional[str] = None, created_at: Optional[str] = None, updated_at: Optional[str] = None):
        self.id = str(id) if id is not None else ""
        self.title = title
        self.description = description or ""
        self.prep_time = prep_time
        self.cook_time = cook_time
        self.servings = servings
        self.ingredients = ingredients[:] if ingredients else []
        self.instructions = instructions[:] if instructions else []
        self.tags = _unique(tags) if tags else []
        self.source = source or DEFAULT_SOURCE
        self.source_url = source_url
        self.favorite = bool(favorite)
        self.notes = notes
        self.created_at = created_at
        self.updated_at = updated_at

    def __str__(self) -> str:
        return f"{self.title} [{self.id}] - {self.servings} servings - Source: {self.source} - Tags: {', '.join(self.tags)}"

    __repr__ = __str__

    def __eq__(self, other) -> bool:
        if not isinstance(other, Recipe):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def copy(self, **changes) -> "Recipe":
        data = {attr: getattr(self, attr) for attr in _FIELD_KEYS}
        data.update(changes)
        return Recipe(**data)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Recipe":
        """Build a Recipe from the cache (camelCase) or remote row (snake_case) format.

        Unknown keys are ignored, so embedded image payloads never reach the entity.
        """
        kwargs: Dict[str, Any] = {}
        for attr, (cache_key, column) in _FIELD_KEYS.items():
            if cache_key in data:
                kwargs[attr] = data[cache_key]
            elif column in data:
                kwargs[attr] = data[column]
        kwargs["prep_time"] = _as_int(kwargs.get("prep_time"), 0)
        kwargs["cook_time"] = _as_int(kwargs.get("cook_time"), 0)
        kwargs["servings"] = _as_int(kwargs.get("servings"), 1)
        for list_attr in ("ingredients", "instructions", "tags"):
            if kwargs.get(list_attr) is None:
                kwargs.pop(list_attr, None)
            else:
                kwargs[list_attr] = list(kwargs[list_attr])
        return Recipe(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Local cache format."""
        return {cache_key: self._export(attr) for attr, (cache_key, _) in _FIELD_KEYS.items()}

    def to_row(self) -> Dict[str, Any]:
        """Remote `recipes` table format."""
        return {column: self._export(attr) for attr, (_, column) in _FIELD_KEYS.items()}

    def _export(self, attr: str) -> Any:
        value = getattr(self, attr)
        if isinstance(value, list):
            return value[:]
        return value

    @staticmethod
    def strip_heavy_fields(entry: Dict[str, Any]) -> Dict[str, Any]:
        """Return a copy of a raw recipe mapping without embedded image payloads."""
        return {k: v for k, v in entry.items() if k not in HEAVY_FIELDS}
