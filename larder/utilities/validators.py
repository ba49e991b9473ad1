"""
Input validation schemas using Pydantic for API bodies and import payloads.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, Optional

from larder.domain.Plan import parse_date
from larder.utilities.constants import MACROS

MEAL_TYPE_PATTERN = r'^(breakfast|lunch|dinner|snack)$'
STORAGE_PATTERN = r'^(pantry|fridge|freezer)$'
GOAL_TYPE_PATTERN = r'^(limit|minimum)$'
IMPORT_MODE_PATTERN = r'^(merge|replace)$'


def _strip(v):
    if isinstance(v, str):
        return v.strip()
    return v


class PantryItemInput(BaseModel):
    """Schema for adding or overwriting a pantry entry."""
    ingredient_id: str = Field(..., min_length=1, max_length=100)
    quantity: Optional[float] = Field(None, ge=0, le=1000000)
    unit: Optional[str] = Field(None, max_length=20)
    storage: Optional[str] = Field(None, pattern=STORAGE_PATTERN)
    notes: Optional[str] = Field(None, max_length=500)

    @field_validator('ingredient_id', 'unit')
    @classmethod
    def strip_whitespace(cls, v):
        """Remove leading/trailing whitespace."""
        return _strip(v)


class PantryQuantityInput(BaseModel):
    """Schema for changing the quantity of an existing pantry entry."""
    quantity: float = Field(..., ge=0, le=1000000)
    unit: Optional[str] = Field(None, max_length=20)


class PantryImportItem(BaseModel):
    """One item of a pantry export file (camelCase keys)."""
    model_config = ConfigDict(populate_by_name=True, extra='ignore')

    ingredient_id: str = Field(..., min_length=1, alias='ingredientId')
    quantity: Optional[float] = Field(None, ge=0)
    unit: Optional[str] = None
    storage: Optional[str] = Field(None, pattern=STORAGE_PATTERN)
    notes: Optional[str] = None

    @field_validator('storage', mode='before')
    @classmethod
    def blank_storage(cls, v):
        """Empty storage means the default location."""
        return v or None


class MealInput(BaseModel):
    """Schema for planning a meal."""
    date: str
    recipe_id: str = Field(..., min_length=1)
    meal_type: str = Field('dinner', pattern=MEAL_TYPE_PATTERN)
    servings: Optional[float] = Field(None, gt=0, le=100)
    notes: str = Field('', max_length=500)

    @field_validator('date')
    @classmethod
    def validate_date(cls, v):
        if parse_date(v) is None:
            raise ValueError('Date must be YYYY-MM-DD')
        return v.strip()


class MealUpdateInput(BaseModel):
    """Schema for editing a planned meal; omitted fields are left unchanged."""
    servings: Optional[float] = Field(None, gt=0, le=100)
    meal_type: Optional[str] = Field(None, pattern=MEAL_TYPE_PATTERN)
    notes: Optional[str] = Field(None, max_length=500)


class EatenInput(BaseModel):
    consumed_servings: Optional[float] = Field(None, ge=0, le=100)


class MoveInput(BaseModel):
    date: str

    @field_validator('date')
    @classmethod
    def validate_date(cls, v):
        if parse_date(v) is None:
            raise ValueError('Date must be YYYY-MM-DD')
        return v.strip()


class GoalInput(BaseModel):
    """Schema for a single daily nutrition goal."""
    target: float = Field(..., gt=0, le=100000)
    type: Optional[str] = Field(None, pattern=GOAL_TYPE_PATTERN)


class PrefsUpdateInput(BaseModel):
    """Schema for a partial nutrition preferences update."""
    enabled: Optional[bool] = None
    goals: Optional[Dict[str, GoalInput]] = None
    show_on_calendar: Optional[bool] = None
    primary_macro: Optional[str] = None

    @field_validator('goals')
    @classmethod
    def validate_macros(cls, v):
        """Only tracked macros may carry goals."""
        if v is None:
            return v
        unknown = [m for m in v if m not in MACROS]
        if unknown:
            raise ValueError(f"Unknown macros: {', '.join(unknown)}")
        return v

    @field_validator('primary_macro')
    @classmethod
    def validate_primary_macro(cls, v):
        if v is not None and v not in MACROS:
            raise ValueError(f"Unknown macro: {v}")
        return v


class ImportRequest(BaseModel):
    """Body of the import endpoints: an export document plus the import mode."""
    data: Dict[str, Any]
    mode: str = Field('merge', pattern=IMPORT_MODE_PATTERN)
