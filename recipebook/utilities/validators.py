"""
Input validation schemas using Pydantic for better data integrity.
"""
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator
from pydantic import ValidationError as PydanticValidationError

from recipebook.domain.Errors import ValidationError
from recipebook.utilities.constants import DAYS, DEFAULT_SOURCE, MEALS


def _clean_lines(v: Any) -> List[str]:
    if v is None:
        return []
    if isinstance(v, str):
        v = [v]
    return [str(line).strip() for line in v if line is not None and str(line).strip()]


def _blank_or(v: Any, default: int) -> Any:
    if v is None or (isinstance(v, str) and not v.strip()):
        return default
    return v


class RecipeDraft(BaseModel):
    """Schema for a new or merged recipe. Field order is the order constraints are reported in."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Optional[str] = Field("", validate_default=True)
    ingredients: List[str] = Field(default_factory=list, validate_default=True)
    instructions: List[str] = Field(default_factory=list, validate_default=True)
    description: Optional[str] = ""
    prep_time: int = Field(0, ge=0, alias="prepTime")
    cook_time: int = Field(0, ge=0, alias="cookTime")
    servings: int = Field(1, ge=1)
    tags: List[str] = Field(default_factory=list)
    source: Optional[str] = DEFAULT_SOURCE
    source_url: Optional[str] = Field(None, alias="sourceUrl")
    favorite: bool = False
    notes: Optional[str] = None

    @field_validator('title', mode='before')
    @classmethod
    def validate_title(cls, v):
        """Title is required and stored trimmed."""
        title = v.strip() if isinstance(v, str) else ""
        if not title:
            raise ValueError('Please enter a recipe title')
        return title

    @field_validator('ingredients', mode='before')
    @classmethod
    def validate_ingredients(cls, v):
        """Drop blank lines; at least one ingredient must remain."""
        lines = _clean_lines(v)
        if not lines:
            raise ValueError('Please add at least one ingredient')
        return lines

    @field_validator('instructions', mode='before')
    @classmethod
    def validate_instructions(cls, v):
        """Drop blank steps; at least one instruction must remain."""
        lines = _clean_lines(v)
        if not lines:
            raise ValueError('Please add at least one instruction')
        return lines

    @field_validator('tags', mode='before')
    @classmethod
    def validate_tags(cls, v):
        """Tags are a set: trimmed, non-empty, first occurrence kept."""
        return list(dict.fromkeys(_clean_lines(v)))

    @field_validator('prep_time', 'cook_time', mode='before')
    @classmethod
    def blank_minutes(cls, v):
        return _blank_or(v, 0)

    @field_validator('servings', mode='before')
    @classmethod
    def blank_servings(cls, v):
        return _blank_or(v, 1)

    @field_validator('source', mode='before')
    @classmethod
    def default_source(cls, v):
        return v.strip() if isinstance(v, str) and v.strip() else DEFAULT_SOURCE


class RecipePatch(BaseModel):
    """Schema for a partial update; only the fields actually sent are applied."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: Optional[str] = None
    ingredients: Optional[List[str]] = None
    instructions: Optional[List[str]] = None
    description: Optional[str] = None
    prep_time: Optional[int] = Field(None, alias="prepTime")
    cook_time: Optional[int] = Field(None, alias="cookTime")
    servings: Optional[int] = None
    tags: Optional[List[str]] = None
    source: Optional[str] = None
    source_url: Optional[str] = Field(None, alias="sourceUrl")
    favorite: Optional[bool] = None
    notes: Optional[str] = None


class CachedRecipe(BaseModel):
    """Shape check for one entry read back from the local cache (camelCase keys).

    Strict: a stored entry whose text fields are not strings is malformed.
    """
    model_config = ConfigDict(extra="ignore")

    id: Optional[Union[StrictStr, StrictInt]] = None
    title: StrictStr = ""
    description: Optional[StrictStr] = None
    ingredients: Optional[List[StrictStr]] = None
    instructions: Optional[List[StrictStr]] = None
    tags: Optional[List[StrictStr]] = None
    source: Optional[StrictStr] = None
    source_url: Optional[StrictStr] = Field(None, alias="sourceUrl")
    notes: Optional[StrictStr] = None
    created_at: Optional[StrictStr] = Field(None, alias="createdAt")
    updated_at: Optional[StrictStr] = Field(None, alias="updatedAt")


class SlotInput(BaseModel):
    """Schema for a (day, meal) meal plan slot."""
    day: str
    meal: str

    @field_validator('day')
    @classmethod
    def validate_day(cls, v):
        if v not in DAYS:
            raise ValueError(f'Invalid day: {v}')
        return v

    @field_validator('meal')
    @classmethod
    def validate_meal(cls, v):
        if v not in MEALS:
            raise ValueError(f'Invalid meal: {v}')
        return v


class SlotAssignment(SlotInput):
    """Schema for assigning a recipe to a slot."""
    recipe_id: str = Field(..., min_length=1)

    @field_validator('recipe_id', mode='before')
    @classmethod
    def numeric_id(cls, v):
        """Timestamp ids may arrive as JSON numbers."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


def first_error(exc: PydanticValidationError) -> ValidationError:
    """Convert a pydantic error into our ValidationError carrying the first unmet constraint."""
    err = exc.errors()[0]
    field = ".".join(str(p) for p in err.get("loc", ())) or None
    reason = (err.get("ctx") or {}).get("error")
    message = str(reason) if reason else f"{field}: {err.get('msg')}"
    return ValidationError(message, field=field)


def validate(schema, data: Any):
    """Validate `data` against a pydantic schema, raising our ValidationError on failure."""
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        raise first_error(e) from e
