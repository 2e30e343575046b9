from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, Field

from .preferences import ALL_MEAL_TYPES, WEEKDAYS


class MealEntry(BaseModel):
    name: str
    calories: Optional[int] = None


# A slot holds either a bare meal name or a {"name", "calories"} mapping
MealSlot = Union[str, Dict[str, Any]]
WeeklyMealPlan = Dict[str, Dict[str, MealSlot]]


def meal_name(value: Any) -> str:
    """Meal name of a slot value, "" when the slot is blank or unrecognised."""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, dict):
        name = value.get("name")
        if isinstance(name, str):
            return name.strip()
    if isinstance(value, MealEntry):
        return value.name.strip()
    return ""


def empty_week() -> WeeklyMealPlan:
    return {day: {meal_type: "" for meal_type in ALL_MEAL_TYPES} for day in WEEKDAYS}


def meal_plan_id(user_id: str, week_start_date: str) -> str:
    return f"{user_id}_{week_start_date}"


class MealHistoryEntry(BaseModel):
    week_start_date: str
    meals: WeeklyMealPlan = Field(default_factory=dict)


class MealPlanDocument(BaseModel):
    id: str
    user_id: str
    week_start_date: str
    meals: WeeklyMealPlan = Field(default_factory=empty_week)
    ai_generated: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
