from fastapi import APIRouter, Depends, HTTPException

from mealplanner.api.deps import (
    AI_USAGE,
    SHOPPING_LIST_USAGE,
    charge_guest_usage,
    enforce_guest_quota,
    get_current_user,
)
from mealplanner.core.config import settings
from mealplanner.models.schemas import (
    ExtractIngredientsRequest,
    GenerateRequest,
    IngredientExtractionResult,
    ShoppingList,
    ShoppingListRequest,
)
from mealplanner.services import meal_store
from mealplanner.services.ingredient_extractor import build_shopping_list, extract_ingredients, meal_plan_hash
from mealplanner.services.llm_json import InvalidAIResponseError
from mealplanner.services.meal_plan_pipeline import (
    NOT_ENOUGH_CONTEXT,
    build_meal_plan,
    has_enough_context,
    user_preferences,
)
from mealplanner.services.week_utils import parse_week_start

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/generate")
async def generate_suggestions(body: GenerateRequest, user=Depends(get_current_user)):
    try:
        week = parse_week_start(body.week_start_date)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid week start date: {body.week_start_date}")

    uid = user["uid"]
    profile = meal_store.get_user(uid)
    history = meal_store.get_meal_history(uid, week, limit=settings.HISTORY_LOOKUP_LIMIT)

    if not has_enough_context(history, user_preferences(profile)):
        raise HTTPException(status_code=400, detail=NOT_ENOUGH_CONTEXT)

    # Quota is only charged once the request is known to be serviceable
    charge_guest_usage(user, AI_USAGE)

    try:
        return build_meal_plan(profile, week, history, ingredients=body.ingredients)
    except InvalidAIResponseError as e:
        print("AI generation error:", e, "| raw:", e.raw[:500])
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        print("AI generation error:", e)
        raise HTTPException(status_code=500, detail=f"AI generation failed: {e}")


@router.post("/extract-ingredients", response_model=IngredientExtractionResult)
async def extract_meal_ingredients(
    body: ExtractIngredientsRequest,
    user=Depends(enforce_guest_quota(SHOPPING_LIST_USAGE)),
):
    if not body.meals and not body.day_wise_meals:
        raise HTTPException(status_code=400, detail="Invalid meals data")

    try:
        return extract_ingredients(body.meals, body.portions, body.day_wise_meals)
    except Exception as e:
        print("Ingredient extraction error:", e)
        raise HTTPException(status_code=500, detail=f"Failed to extract ingredients: {e}")


@router.post("/shopping-list", response_model=ShoppingList)
async def get_shopping_list(body: ShoppingListRequest, user=Depends(get_current_user)):
    try:
        week = parse_week_start(body.week_start_date)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid week start date: {body.week_start_date}")

    uid = user["uid"]
    plan_hash = meal_plan_hash(body.meals, body.day_wise_meals, body.portions)

    existing = meal_store.get_shopping_list(uid, week)
    if existing and existing.get("meal_plan_hash") == plan_hash:
        return ShoppingList(
            categorized=existing.get("categorized") or {},
            day_wise=existing.get("day_wise"),
            cached=True,
        )
    if existing:
        meal_store.delete_shopping_list(uid, week)

    # Only fresh generations count against the guest quota
    charge_guest_usage(user, SHOPPING_LIST_USAGE)

    try:
        result = build_shopping_list(body.day_wise_meals, body.portions)
    except Exception as e:
        print("Shopping list generation error:", e)
        raise HTTPException(status_code=500, detail=f"Failed to get shopping list: {e}")

    meal_store.save_shopping_list(uid, week, plan_hash, result.categorized, result.day_wise, body.portions)
    return result
