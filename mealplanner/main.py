from fastapi import FastAPI
from mealplanner.core.firebase import init_firebase
from mealplanner.api.routes.router import api_router

app = FastAPI(title="Weekly Meal Planner Backend")


@app.on_event("startup")
def startup():
    """Initialize third-party services at app startup."""
    try:
        init_firebase()
    except RuntimeError as e:
        # Translate and health routes work without Firestore; log and continue.
        print(f"Warning: Firebase not initialized at startup: {e}")


@app.get("/")
async def root():
    return {"message": "Weekly Meal Planner Backend is running"}


@app.get("/health")
async def health_check():
    return {"status": "ok"}


app.include_router(api_router)
