"""Authentication-related routes.

Frontend performs authentication with Firebase (guests use anonymous
sign-in); backend exposes the verified identity and the profile state
the UI needs.
"""
from fastapi import APIRouter, Depends

from mealplanner.api.deps import AI_USAGE, SHOPPING_LIST_USAGE, get_current_user, guest_limit, is_guest
from mealplanner.services import meal_store

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me")
async def get_me(user=Depends(get_current_user)):
    profile = meal_store.get_user(user["uid"])
    guest = is_guest(user)

    me = {
        "uid": user.get("uid"),
        "email": user.get("email") or profile.get("email"),
        "name": profile.get("name") or user.get("name"),
        "is_guest": guest,
        "onboarding_completed": bool(profile.get("onboarding_completed")),
        AI_USAGE: int(profile.get(AI_USAGE) or 0),
        SHOPPING_LIST_USAGE: int(profile.get(SHOPPING_LIST_USAGE) or 0),
    }
    if guest:
        me["guest_usage_limits"] = {
            AI_USAGE: guest_limit(AI_USAGE),
            SHOPPING_LIST_USAGE: guest_limit(SHOPPING_LIST_USAGE),
        }
    return me
