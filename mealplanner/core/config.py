# mealplanner/core/config.py
from __future__ import annotations

from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Gemini (GOOGLE_API_KEY accepted as a fallback name)
    GEMINI_API_KEY: str = Field(
        default="", validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY")
    )
    GEMINI_MODEL: str = "gemini-2.5-flash-lite"

    # Google Translate v2
    GOOGLE_TRANSLATE_API_KEY: str = ""
    TRANSLATE_TIMEOUT_SECONDS: float = 30.0
    # None means no expiry / no size cap
    TRANSLATION_CACHE_TTL_SECONDS: Optional[float] = None
    TRANSLATION_CACHE_MAX_ENTRIES: Optional[int] = None

    # Firebase service account json
    FIREBASE_CREDENTIALS: str = "mealplanner/core/firebase_key.json"

    # Cron
    CRON_SECRET: str = ""
    CRON_BATCH_SIZE: int = 12

    HISTORY_LOOKUP_LIMIT: int = 5

    # Guest (anonymous sign-in) quotas
    GUEST_AI_LIMIT: int = 3
    GUEST_SHOPPING_LIST_LIMIT: int = 3

    AI_DEBUG_MODE: bool = False

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
