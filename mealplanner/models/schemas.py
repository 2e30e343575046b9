from pydantic import BaseModel, Field
from typing import Optional, List, Any, Dict

from .meal_plan import WeeklyMealPlan

# Request / response bodies for the HTTP API


class GenerateRequest(BaseModel):
    week_start_date: str
    # None -> use the pantry stored on the user profile
    ingredients: Optional[List[str]] = None


class MealsUpdate(BaseModel):
    meals: WeeklyMealPlan


# day -> meal type -> meal name
DayWiseMeals = Dict[str, Dict[str, str]]


class ExtractIngredientsRequest(BaseModel):
    meals: List[str]
    day_wise_meals: Optional[DayWiseMeals] = None
    portions: int = Field(default=1, ge=1)


class ShoppingListRequest(BaseModel):
    meals: List[str]
    day_wise_meals: DayWiseMeals
    portions: int = Field(default=1, ge=1)
    week_start_date: str


class IngredientExtractionResult(BaseModel):
    grouped: List[Dict[str, Any]] = Field(default_factory=list)
    consolidated: List[str] = Field(default_factory=list)
    weights: Dict[str, Any] = Field(default_factory=dict)
    categorized: Dict[str, Any] = Field(default_factory=dict)
    day_wise: Optional[Dict[str, Any]] = None

    @classmethod
    def empty(cls) -> "IngredientExtractionResult":
        return cls()


class ShoppingList(BaseModel):
    categorized: Dict[str, Any] = Field(default_factory=dict)
    day_wise: Optional[Dict[str, Any]] = None
    cached: bool = False


class TranslateRequest(BaseModel):
    text: str = Field(..., min_length=1)
    target_language: str = Field(..., min_length=1)
    source_language: Optional[str] = None


class BatchTranslateRequest(BaseModel):
    texts: List[str] = Field(..., min_length=1)
    target_language: str = Field(..., min_length=1)
    source_language: Optional[str] = None
