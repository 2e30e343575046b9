"""
API dependencies (Firebase auth verification, guest quotas, cron secret).
"""

import hmac
from typing import Callable

from fastapi import Depends, Header, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from firebase_admin import auth

from mealplanner.core.config import settings
from mealplanner.services import meal_store

security = HTTPBearer(auto_error=True)

# Guest usage counters stored on users/{uid}
AI_USAGE = "ai_usage_count"
SHOPPING_LIST_USAGE = "shopping_list_usage_count"


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
):
    """
    Verify Firebase ID token from Authorization header.

    Expects:
        Authorization: Bearer <id_token>
    """
    try:
        id_token = credentials.credentials
        decoded = auth.verify_id_token(id_token)
        return decoded
    except Exception as exc:
        raise HTTPException(
            status_code=401,
            detail="Invalid ID token",
        ) from exc


def is_guest(user: dict) -> bool:
    """Guests are Firebase anonymous sign-ins."""
    return (user.get("firebase") or {}).get("sign_in_provider") == "anonymous"


def guest_limit(counter: str) -> int:
    if counter == AI_USAGE:
        return settings.GUEST_AI_LIMIT
    return settings.GUEST_SHOPPING_LIST_LIMIT


def charge_guest_usage(user: dict, counter: str):
    """
    Reject a guest who used up their quota for `counter` (403), otherwise
    count this request against it. Registered users are never charged.
    """
    if not is_guest(user):
        return

    uid = user["uid"]
    profile = meal_store.get_user(uid)
    current = int(profile.get(counter) or 0)
    limit = int((profile.get("guest_usage_limits") or {}).get(counter) or guest_limit(counter))

    if current >= limit:
        raise HTTPException(
            status_code=403,
            detail={
                "error": f"Guest users are limited to {limit} uses. "
                         "Please create an account for unlimited access.",
                "is_guest_limit_reached": True,
                "usage_limit": limit,
                "current_usage": current,
            },
        )

    meal_store.increment_usage(uid, counter)


def enforce_guest_quota(counter: str) -> Callable:
    """Return a FastAPI dependency that charges guest usage for `counter`."""

    def _checker(user=Depends(get_current_user)):
        charge_guest_usage(user, counter)
        return user

    return _checker


def verify_cron_secret(authorization: str = Header(default="")):
    expected = f"Bearer {settings.CRON_SECRET}"
    if not settings.CRON_SECRET or not hmac.compare_digest(authorization, expected):
        raise HTTPException(status_code=401, detail="Unauthorized")
