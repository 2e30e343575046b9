"""User preference routes, stored on users/{uid}."""

from typing import List

from fastapi import APIRouter, Body, Depends

from mealplanner.api.deps import get_current_user
from mealplanner.models.preferences import DietaryPreferences, DishPreferences, MealSettings
from mealplanner.services import meal_store
from mealplanner.services.meal_plan_pipeline import user_preferences

router = APIRouter(prefix="/preferences", tags=["preferences"])


@router.get("/dietary")
async def get_dietary_preferences(user=Depends(get_current_user)):
    return user_preferences(meal_store.get_user(user["uid"]))["dietary_preferences"]


@router.put("/dietary")
async def update_dietary_preferences(
    preferences: DietaryPreferences,
    user=Depends(get_current_user),
):
    meal_store.update_user(user["uid"], {"dietary_preferences": preferences.model_dump()})
    return {"dietary_preferences": preferences}


@router.get("/cuisines")
async def get_cuisine_preferences(user=Depends(get_current_user)):
    return {"cuisines": user_preferences(meal_store.get_user(user["uid"]))["cuisine_preferences"]}


@router.put("/cuisines")
async def update_cuisine_preferences(
    cuisines: List[str] = Body(..., embed=True),
    user=Depends(get_current_user),
):
    cleaned = [c.strip() for c in cuisines if c and c.strip()]
    meal_store.update_user(user["uid"], {"cuisine_preferences": cleaned})
    return {"cuisines": cleaned}


@router.get("/dishes")
async def get_dish_preferences(user=Depends(get_current_user)):
    return user_preferences(meal_store.get_user(user["uid"]))["dish_preferences"]


@router.put("/dishes")
async def update_dish_preferences(
    dishes: DishPreferences,
    user=Depends(get_current_user),
):
    meal_store.update_user(user["uid"], {"dish_preferences": dishes.model_dump()})
    return dishes


@router.get("/ingredients")
async def get_pantry_ingredients(user=Depends(get_current_user)):
    return {"ingredients": user_preferences(meal_store.get_user(user["uid"]))["ingredients"]}


@router.put("/ingredients")
async def update_pantry_ingredients(
    ingredients: List[str] = Body(..., embed=True),
    user=Depends(get_current_user),
):
    cleaned = [i.strip() for i in ingredients if i and i.strip()]
    meal_store.update_user(user["uid"], {"ingredients": cleaned})
    return {"ingredients": cleaned}


@router.get("/meal-settings")
async def get_meal_settings(user=Depends(get_current_user)):
    return {"meal_settings": user_preferences(meal_store.get_user(user["uid"]))["meal_settings"]}


@router.put("/meal-settings")
async def update_meal_settings(
    meal_settings: MealSettings = Body(..., embed=True),
    user=Depends(get_current_user),
):
    # Validation (non-empty, chronological) happens in MealSettings; FastAPI answers 422
    meal_store.update_user(user["uid"], {"meal_settings": meal_settings.model_dump()})
    return {"success": True, "meal_settings": meal_settings}
