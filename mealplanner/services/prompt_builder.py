"""
Builds the weekly meal suggestion prompt sent to Gemini.

The prompt is assembled from the user's stored state (dietary flags,
cuisine and dish preferences, pantry ingredients, enabled meal types)
and their two most recent non-empty weeks of meal history, and ends
with the exact JSON shape the model has to return.
"""
import json
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import BaseModel

from mealplanner.models.meal_plan import MealHistoryEntry, meal_name
from mealplanner.models.preferences import (
    WEEKDAYS,
    DietaryPreferences,
    DishPreferences,
    MealSettings,
)

MAX_HISTORY_WEEKS = 2

NO_DIETARY_PREFERENCES = "No specific dietary preferences"
NO_HISTORY = "No previous meal history available."
NO_CUISINE_PREFERENCES = "No specific cuisine preferences"
NO_DISH_PREFERENCES = "No specific dish preferences"

VEGETARIAN_RULE = (
    "The user is strictly vegetarian. Never suggest non-vegetarian meals.\n"
    "Exclude any dish with meat, fish, or eggs.\n"
    "If uncertain, default to a vegetarian option."
)
NON_VEG_DAYS_RULE = (
    "Non-vegetarian. The user can eat non veg only on the days: {days}. "
    "Exclude any dish with meat, fish, or eggs on other days."
)
NON_VEG_ANY_DAY_RULE = (
    "Non-vegetarian. The user can eat non veg on any day. "
    "Have a mix of vegetarian and non-vegetarian meals."
)
GLUTEN_FREE_RULE = "Do not suggest any dish containing gluten (wheat, maida, semolina, barley, rye)."
NUTS_FREE_RULE = "Do not suggest any dish containing nuts or nut pastes."
LACTOSE_FREE_RULE = "Do not suggest any dish containing milk or dairy (paneer, curd, cream, cheese)."
PREFER_HEALTHY_RULE = (
    "Prefer healthy options: plenty of vegetables, whole grains and lean protein, "
    "little deep-fried food or added sugar."
)

MEAL_NAME_PLACEHOLDER = "meal name"
CALORIES_PLACEHOLDER = 500


class MealPrompt(BaseModel):
    prompt: str
    json_format: str


# -------------------------
# Dietary preferences
# -------------------------
def get_dietary_info(prefs: Optional[DietaryPreferences]) -> str:
    if prefs is None:
        return NO_DIETARY_PREFERENCES

    lines = []
    if prefs.is_vegetarian:
        lines.append(f"Dietary Preferences: {VEGETARIAN_RULE}")
    elif prefs.non_veg_days is not None:
        days = ", ".join(prefs.non_veg_days) or "none"
        lines.append(f"Dietary Preferences: {NON_VEG_DAYS_RULE.format(days=days)}")
    else:
        lines.append(f"Dietary Preferences: {NON_VEG_ANY_DAY_RULE}")

    if prefs.gluten_free:
        lines.append(GLUTEN_FREE_RULE)
    if prefs.nuts_free:
        lines.append(NUTS_FREE_RULE)
    if prefs.lactose_intolerant:
        lines.append(LACTOSE_FREE_RULE)
    if prefs.prefer_healthy:
        lines.append(PREFER_HEALTHY_RULE)

    if prefs.show_calories:
        lines.append("\nCalorie Tracking: ENABLED")
        if prefs.daily_calorie_target:
            lines.append(f"Daily Calorie Target: {prefs.daily_calorie_target} kcal")
            lines.append("Please suggest meals that help stay within this daily calorie target.")

    return "\n".join(lines)


# -------------------------
# Meal history
# -------------------------
def is_day_empty(day_meals: Any, enabled_meal_types: List[str]) -> bool:
    if not isinstance(day_meals, dict):
        return True
    return all(not meal_name(day_meals.get(meal_type)) for meal_type in enabled_meal_types)


def is_week_empty(meals: Any, enabled_meal_types: List[str]) -> bool:
    if not isinstance(meals, dict):
        return True
    return all(is_day_empty(meals.get(day), enabled_meal_types) for day in WEEKDAYS)


def _as_history_entry(entry: Union[MealHistoryEntry, Dict[str, Any]]) -> MealHistoryEntry:
    if isinstance(entry, MealHistoryEntry):
        return entry
    return MealHistoryEntry.model_validate(
        {"week_start_date": entry.get("week_start_date", ""), "meals": entry.get("meals") or {}}
    )


def select_history(
    history: Iterable[Union[MealHistoryEntry, Dict[str, Any]]],
    enabled_meal_types: List[str],
) -> List[MealHistoryEntry]:
    """First (most recent) weeks that have at least one named meal, at most two."""
    selected = []
    for raw in history or []:
        entry = _as_history_entry(raw)
        if is_week_empty(entry.meals, enabled_meal_types):
            continue
        selected.append(entry)
        if len(selected) == MAX_HISTORY_WEEKS:
            break
    return selected


def render_history(weeks: List[MealHistoryEntry], enabled_meal_types: List[str]) -> str:
    if not weeks:
        return NO_HISTORY

    blocks = []
    for week in weeks:
        lines = [f"Week of {week.week_start_date}:"]
        for day in WEEKDAYS:
            day_meals = week.meals.get(day)
            if is_day_empty(day_meals, enabled_meal_types):
                continue
            names = [meal_name(day_meals.get(t)) or "empty" for t in enabled_meal_types]
            lines.append(f"  {day}: {' / '.join(names)}")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


# -------------------------
# Output format
# -------------------------
def get_json_format(enabled_meal_types: List[str], show_calories: bool = False) -> str:
    if show_calories:
        slot = {"name": MEAL_NAME_PLACEHOLDER, "calories": CALORIES_PLACEHOLDER}
    else:
        slot = MEAL_NAME_PLACEHOLDER

    template = {day: {meal_type: slot for meal_type in enabled_meal_types} for day in WEEKDAYS}
    return json.dumps(template, indent=2)


def _calorie_instructions(prefs: DietaryPreferences) -> str:
    lines = [
        "IMPORTANT - Calorie Information:",
        "- Include calorie count for EACH meal in the response",
        "- Provide realistic calorie estimates based on typical portion sizes",
        '- Format: { "name": "meal name", "calories": number }',
    ]
    if prefs.daily_calorie_target:
        lines.append(f"- Try to keep total daily calories around {prefs.daily_calorie_target} kcal")
    return "\n".join(lines)


def _dish_info(dishes: DishPreferences) -> str:
    if not dishes.is_complete():
        return NO_DISH_PREFERENCES
    return "\n".join([
        "User likes the following dishes:",
        f"  Breakfast: {', '.join(dishes.breakfast)}",
        f"  Lunch/Dinner: {', '.join(dishes.lunch_dinner)}",
    ])


# -------------------------
# Full prompt
# -------------------------
def build_meal_prompt(
    week_start_date: str,
    dietary_preferences: Optional[DietaryPreferences] = None,
    cuisine_preferences: Optional[List[str]] = None,
    dish_preferences: Optional[DishPreferences] = None,
    ingredients: Optional[List[str]] = None,
    meal_settings: Optional[MealSettings] = None,
    history: Optional[List[Union[MealHistoryEntry, Dict[str, Any]]]] = None,
) -> MealPrompt:
    cuisines = [c for c in (cuisine_preferences or []) if c and c.strip()]
    dishes = dish_preferences or DishPreferences()
    pantry = [i for i in (ingredients or []) if i and i.strip()]
    enabled = list((meal_settings or MealSettings()).enabled_meal_types)
    show_calories = bool(dietary_preferences and dietary_preferences.show_calories)

    weeks = select_history(history or [], enabled)
    json_format = get_json_format(enabled, show_calories)

    ingredients_info = (
        f"Must use all of the following ingredients in at least one dish: {', '.join(pantry)}"
        if pantry else ""
    )
    cuisine_info = (
        f"Preferred cuisines: {', '.join(cuisines)}. Include authentic dishes from these cuisines."
        if cuisines else NO_CUISINE_PREFERENCES
    )

    instructions = [
        "Similar to the user's meal history but do not repeat the same meals"
        if weeks else "Based on their dish preferences but do not repeat the same meals",
        "Respect their dietary restrictions",
        "Use all of the ingredients listed above in at least one dish"
        if pantry else "Use common ingredients that are easily available",
        f"Focus on {', '.join(cuisines)} cuisine" if cuisines else "Use any appropriate cuisine",
        "Easy to prepare",
    ]
    if dishes.is_complete():
        instructions.append("Use the dishes provided above as reference for selecting other dishes")
    instructions.append("Do not repeat the suggestions. Provide new suggestions for each day.")
    if weeks:
        instructions.append("Do not suggest the options which are present in the meal history provided above.")

    numbered = "\n".join(f"{i}. {text}" for i, text in enumerate(instructions, start=1))

    sections = [
        "Based on the following meal history, dietary preferences, available ingredients, "
        f"and preferences, suggest meals for the week of {week_start_date}.",
        get_dietary_info(dietary_preferences),
        ingredients_info,
        f"{cuisine_info}\n{_dish_info(dishes)}",
        f"Meal History:\n{render_history(weeks, enabled)}",
        f"Please suggest meals for each day ({', '.join(enabled)}) that are:\n{numbered}",
        _calorie_instructions(dietary_preferences) if show_calories else "",
        f"Return the suggestions in this exact JSON format:\n{json_format}",
    ]

    prompt = "\n\n".join(s for s in sections if s)
    return MealPrompt(prompt=prompt, json_format=json_format)
