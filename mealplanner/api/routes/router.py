from fastapi import APIRouter

from mealplanner.api.routes.auth import router as auth_router
from mealplanner.api.routes.preferences import router as preferences_router
from mealplanner.api.routes.meals import router as meals_router
from mealplanner.api.routes.ai import router as ai_router
from mealplanner.api.routes.translate import router as translate_router
from mealplanner.api.routes.cron import router as cron_router

api_router = APIRouter()

# User routes
api_router.include_router(auth_router)
api_router.include_router(preferences_router)
api_router.include_router(meals_router)

# AI routes
api_router.include_router(ai_router)

# Public / scheduled routes
api_router.include_router(translate_router)
api_router.include_router(cron_router)
