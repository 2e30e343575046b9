"""
Scheduled jobs, triggered by an external scheduler with
`Authorization: Bearer <CRON_SECRET>`.
"""
import traceback

from fastapi import APIRouter, Depends

from mealplanner.api.deps import verify_cron_secret
from mealplanner.core.config import settings
from mealplanner.services.logger import log_debug
from mealplanner.services.meal_plan_pipeline import generate_for_user, users_for_generation
from mealplanner.services.week_utils import format_date, next_week_start

router = APIRouter(prefix="/cron", tags=["cron"], dependencies=[Depends(verify_cron_secret)])


@router.get("/generate-meal-plans")
async def generate_meal_plans():
    """Pre-generate next week's plan for one batch of eligible users."""
    week = format_date(next_week_start())
    print(f"Generating meal plans for week starting: {week}")

    users, skipped_invalid_emails = users_for_generation(week, settings.CRON_BATCH_SIZE)

    processed = success = failed = 0
    for uid, user in users:
        processed += 1
        try:
            plan = generate_for_user(uid, user, week)
        except Exception as e:
            # One bad user must not stop the batch
            print(f"Error processing user {uid}: {e}")
            traceback.print_exc()
            failed += 1
            continue

        if plan:
            success += 1
        else:
            print(f"Failed to generate meal plan for user: {uid}")
            failed += 1

    summary = {
        "message": "AI meal plan generation batch completed" if users else "No users to process",
        "processed": processed,
        "success": success,
        "failed": failed,
        "skipped_invalid_emails": skipped_invalid_emails,
        "week_start_date": week,
    }
    log_debug("cron_generate_meal_plans", summary)
    return summary
