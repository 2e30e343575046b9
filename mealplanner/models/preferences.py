from typing import List, Literal, Optional

from pydantic import BaseModel, Field, PositiveInt, field_validator

Weekday = Literal["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
MealType = Literal["breakfast", "morningSnack", "lunch", "eveningSnack", "dinner"]

WEEKDAYS: List[str] = ["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

# Chronological order within a day
ALL_MEAL_TYPES: List[str] = ["breakfast", "morningSnack", "lunch", "eveningSnack", "dinner"]

DEFAULT_MEAL_TYPES: List[str] = ["breakfast", "lunch", "dinner"]


def sort_meal_types(meal_types: List[str]) -> List[str]:
    """Return the known meal types from `meal_types` in chronological order, deduplicated."""
    wanted = set(meal_types)
    return [t for t in ALL_MEAL_TYPES if t in wanted]


def sort_weekdays(days: List[str]) -> List[str]:
    wanted = set(days)
    return [d for d in WEEKDAYS if d in wanted]


class DietaryPreferences(BaseModel):
    is_vegetarian: bool = False
    # None -> non veg on any day; [] -> on no day
    non_veg_days: Optional[List[Weekday]] = None
    gluten_free: bool = False
    nuts_free: bool = False
    lactose_intolerant: bool = False
    prefer_healthy: bool = False
    show_calories: bool = False
    daily_calorie_target: Optional[PositiveInt] = None

    @field_validator("non_veg_days", mode="before")
    @classmethod
    def normalize_days(cls, v):
        if v is None:
            return None
        if isinstance(v, (list, tuple, set)):
            return sort_weekdays([str(d).strip().lower() for d in v])
        return v


class MealSettings(BaseModel):
    enabled_meal_types: List[MealType] = Field(default_factory=lambda: list(DEFAULT_MEAL_TYPES))

    @field_validator("enabled_meal_types")
    @classmethod
    def chronological_and_non_empty(cls, v):
        ordered = sort_meal_types(v)
        if not ordered:
            raise ValueError("At least one meal type must be enabled")
        return ordered


class DishPreferences(BaseModel):
    breakfast: List[str] = Field(default_factory=list)
    lunch_dinner: List[str] = Field(default_factory=list)

    def is_complete(self) -> bool:
        """Both lists filled in; a half-filled onboarding step does not count."""
        return bool(self.breakfast) and bool(self.lunch_dinner)


class CuisinePreferences(BaseModel):
    cuisines: List[str] = Field(default_factory=list)


class PantryIngredients(BaseModel):
    ingredients: List[str] = Field(default_factory=list)
