from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional

from mealplanner.api.deps import get_current_user
from mealplanner.models.schemas import MealsUpdate
from mealplanner.services import meal_store
from mealplanner.services.week_utils import format_date, parse_week_start, week_start

router = APIRouter(prefix="/meals", tags=["meals"])


def _week_or_400(value: str) -> str:
    try:
        return parse_week_start(value)
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid week start date: {value}")


# Declared before /{week_start_date} so "history" is not taken as a date
@router.get("/history")
async def get_meal_history(
    target_week: Optional[str] = Query(None),
    limit: int = Query(10, ge=1, le=52),
    user=Depends(get_current_user),
):
    reference = _week_or_400(target_week) if target_week else format_date(week_start())
    return meal_store.get_meal_history(user["uid"], reference, limit=limit)


@router.get("/{week_start_date}")
async def get_meal_plan(week_start_date: str, user=Depends(get_current_user)):
    week = _week_or_400(week_start_date)
    return meal_store.get_or_create_meal_plan(user["uid"], week)


@router.put("/{week_start_date}")
async def update_meal_plan(
    week_start_date: str,
    body: MealsUpdate,
    user=Depends(get_current_user),
):
    week = _week_or_400(week_start_date)
    return meal_store.save_meal_plan(user["uid"], week, body.meals)
