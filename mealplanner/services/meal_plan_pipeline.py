from typing import Any, Dict, List, Optional, Tuple

from pydantic import ValidationError

from mealplanner.core.config import settings
from mealplanner.models.preferences import WEEKDAYS, DietaryPreferences, DishPreferences, MealSettings
from mealplanner.services import meal_store
from mealplanner.services.logger import log_debug
from mealplanner.services.meal_suggester import generate_meal_suggestions
from mealplanner.services.prompt_builder import build_meal_prompt

NOT_ENOUGH_CONTEXT = (
    "Need at least 1 week of meal history, cuisine preferences, or dish preferences "
    "to generate suggestions"
)


def _validate_fields(model_cls, data: Any, label: str):
    """
    Validate a stored preferences mapping, dropping only the fields that fail
    (e.g. a zero calorie target) so valid flags such as is_vegetarian survive.
    None when `data` is not a mapping.
    """
    if not isinstance(data, dict):
        return None
    try:
        return model_cls.model_validate(data)
    except ValidationError as e:
        bad = {str(err["loc"][0]) for err in e.errors() if err.get("loc")}
        print(f"Warning: ignoring invalid {label} fields {sorted(bad)}")

    try:
        return model_cls.model_validate({k: v for k, v in data.items() if k not in bad})
    except ValidationError:
        return model_cls()


def user_preferences(user: Dict[str, Any]) -> Dict[str, Any]:
    """Typed preferences from a users/{uid} document; malformed fields fall back to defaults."""
    dietary = None
    if user.get("dietary_preferences"):
        dietary = _validate_fields(DietaryPreferences, user["dietary_preferences"], "dietary preference")

    dishes = _validate_fields(DishPreferences, user.get("dish_preferences") or {}, "dish preference")
    meal_settings = _validate_fields(MealSettings, user.get("meal_settings") or {}, "meal setting")

    return {
        "dietary_preferences": dietary,
        "cuisine_preferences": list(user.get("cuisine_preferences") or []),
        "dish_preferences": dishes if dishes is not None else DishPreferences(),
        "meal_settings": meal_settings if meal_settings is not None else MealSettings(),
        "ingredients": list(user.get("ingredients") or []),
    }


def has_enough_context(history: List[Dict[str, Any]], prefs: Dict[str, Any]) -> bool:
    return bool(history) or bool(prefs["cuisine_preferences"]) or prefs["dish_preferences"].is_complete()


def build_meal_plan(
    user: Dict[str, Any],
    week_start_date: str,
    history: List[Dict[str, Any]],
    ingredients: Optional[List[str]] = None,
    model=None,
) -> Dict[str, Any]:
    prefs = user_preferences(user)
    meal_prompt = build_meal_prompt(
        week_start_date,
        dietary_preferences=prefs["dietary_preferences"],
        cuisine_preferences=prefs["cuisine_preferences"],
        dish_preferences=prefs["dish_preferences"],
        ingredients=ingredients if ingredients is not None else prefs["ingredients"],
        meal_settings=prefs["meal_settings"],
        history=history,
    )
    log_debug("meal_prompt_built", {"week": week_start_date, "history_weeks": len(history)})
    return generate_meal_suggestions(meal_prompt.prompt, model=model)


def plan_days(suggestions: Dict[str, Any]) -> Dict[str, Any]:
    """Weekday entries of a model reply, also accepting a {"meals": {...}} wrapper."""
    if isinstance(suggestions.get("meals"), dict) and not any(d in suggestions for d in WEEKDAYS):
        suggestions = suggestions["meals"]
    return {day: suggestions[day] for day in WEEKDAYS if isinstance(suggestions.get(day), dict)}


# -------------------------
# Weekly pre-generation (cron)
# -------------------------
def users_for_generation(week_start_date: str, batch_size: int) -> Tuple[List[Tuple[str, Dict[str, Any]]], int]:
    """Onboarded, subscribed users with no plan for the week yet and enough context."""
    eligible = []
    skipped_invalid_emails = 0

    for doc in meal_store.list_onboarded_users():
        uid = doc.id
        user = doc.to_dict() or {}
        email = user.get("email") or ""

        if "@" not in email:
            skipped_invalid_emails += 1
            continue

        if (user.get("email_preferences") or {}).get("weekly_meal_plans") is False:
            continue

        if meal_store.meal_plan_exists(uid, week_start_date):
            continue

        history = meal_store.get_meal_history(uid, week_start_date, limit=1)
        if not has_enough_context(history, user_preferences(user)):
            print(f"Skipping user {uid} - no history or preferences")
            continue

        eligible.append((uid, user))
        if len(eligible) >= batch_size:
            break

    return eligible, skipped_invalid_emails


def generate_for_user(uid: str, user: Dict[str, Any], week_start_date: str, model=None) -> Optional[Dict[str, Any]]:
    history = meal_store.get_meal_history(uid, week_start_date, limit=settings.HISTORY_LOOKUP_LIMIT)
    # Weekly plans are built from preferences and history only, not the pantry
    suggestions = build_meal_plan(user, week_start_date, history, ingredients=[], model=model)

    meals = plan_days(suggestions)
    if not meals:
        return None
    return meal_store.save_meal_plan(uid, week_start_date, meals, ai_generated=True)
