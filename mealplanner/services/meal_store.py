"""
Firestore access for users, weekly meal plans and shopping lists.

Layout:
  users/{uid}                        preferences, settings, usage counters
  meal_plans/{uid}_{week_start}      one weekly grid per user and week
  shopping_lists/{uid}_{week_start}  cached AI shopping list for a week
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from firebase_admin import firestore
from google.cloud.firestore import FieldFilter

from mealplanner.core.firebase import get_db
from mealplanner.models.meal_plan import empty_week, meal_plan_id

USERS = "users"
MEAL_PLANS = "meal_plans"
SHOPPING_LISTS = "shopping_lists"


def _now():
    return datetime.now(timezone.utc)


# -------------------------
# Users
# -------------------------
def get_user(uid: str) -> Dict[str, Any]:
    doc = get_db().collection(USERS).document(uid).get()
    return (doc.to_dict() or {}) if doc.exists else {}


def update_user(uid: str, fields: Dict[str, Any]) -> Dict[str, Any]:
    ref = get_db().collection(USERS).document(uid)
    ref.set({**fields, "updated_at": _now()}, merge=True)
    return fields


def increment_usage(uid: str, counter: str):
    get_db().collection(USERS).document(uid).set(
        {counter: firestore.Increment(1), "updated_at": _now()},
        merge=True,
    )


def list_onboarded_users(max_users: int = 1000):
    """Snapshots of users who finished onboarding, ordered by email."""
    return (
        get_db().collection(USERS)
        .where(filter=FieldFilter("onboarding_completed", "==", True))
        .order_by("email")
        .limit(max_users)
        .stream()
    )


# -------------------------
# Meal plans
# -------------------------
def get_meal_plan(uid: str, week_start_date: str) -> Optional[Dict[str, Any]]:
    doc = get_db().collection(MEAL_PLANS).document(meal_plan_id(uid, week_start_date)).get()
    if not doc.exists:
        return None
    return {"id": doc.id, **(doc.to_dict() or {})}


def meal_plan_exists(uid: str, week_start_date: str) -> bool:
    return get_db().collection(MEAL_PLANS).document(meal_plan_id(uid, week_start_date)).get().exists


def save_meal_plan(
    uid: str,
    week_start_date: str,
    meals: Dict[str, Any],
    ai_generated: bool = False,
) -> Dict[str, Any]:
    now = _now()
    plan = {
        "user_id": uid,
        "week_start_date": week_start_date,
        "meals": meals,
        "ai_generated": ai_generated,
        "created_at": now,
        "updated_at": now,
    }
    doc_id = meal_plan_id(uid, week_start_date)
    get_db().collection(MEAL_PLANS).document(doc_id).set(plan)
    return {"id": doc_id, **plan}


def get_or_create_meal_plan(uid: str, week_start_date: str) -> Dict[str, Any]:
    existing = get_meal_plan(uid, week_start_date)
    if existing is not None:
        return existing
    return save_meal_plan(uid, week_start_date, empty_week())


def get_meal_history(uid: str, before_week: str, limit: int = 5) -> List[Dict[str, Any]]:
    """Weeks strictly before `before_week`, most recent first."""
    docs = (
        get_db().collection(MEAL_PLANS)
        .where(filter=FieldFilter("user_id", "==", uid))
        .where(filter=FieldFilter("week_start_date", "<", before_week))
        .order_by("week_start_date", direction=firestore.Query.DESCENDING)
        .limit(limit)
        .stream()
    )
    return [{"id": d.id, **(d.to_dict() or {})} for d in docs]


# -------------------------
# Shopping lists
# -------------------------
def get_shopping_list(uid: str, week_start_date: str) -> Optional[Dict[str, Any]]:
    doc = get_db().collection(SHOPPING_LISTS).document(meal_plan_id(uid, week_start_date)).get()
    if not doc.exists:
        return None
    return doc.to_dict() or {}


def save_shopping_list(
    uid: str,
    week_start_date: str,
    meal_plan_hash: str,
    categorized: Dict[str, Any],
    day_wise: Optional[Dict[str, Any]],
    portions: int,
):
    now = _now()
    get_db().collection(SHOPPING_LISTS).document(meal_plan_id(uid, week_start_date)).set({
        "user_id": uid,
        "week_start_date": week_start_date,
        "meal_plan_hash": meal_plan_hash,
        "categorized": categorized,
        "day_wise": day_wise,
        "portions": portions,
        "created_at": now,
        "updated_at": now,
    })


def delete_shopping_list(uid: str, week_start_date: str):
    get_db().collection(SHOPPING_LISTS).document(meal_plan_id(uid, week_start_date)).delete()
