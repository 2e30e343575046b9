"""On-demand UI text translation backed by the shared translation cache."""

from fastapi import APIRouter, HTTPException

from mealplanner.models.schemas import BatchTranslateRequest, TranslateRequest
from mealplanner.services.translation import get_translation_client

router = APIRouter(prefix="/translate", tags=["translate"])


def _client():
    try:
        return get_translation_client()
    except RuntimeError as e:
        raise HTTPException(status_code=500, detail="Google Translate API key not configured") from e


@router.post("")
async def translate_text(body: TranslateRequest):
    client = _client()
    try:
        translated = client.translate(body.text, body.target_language, body.source_language)
    except Exception as e:
        print("Translation API error:", e)
        raise HTTPException(status_code=500, detail=f"Translation failed: {e}")
    return {"translated_text": translated}


@router.post("/batch")
async def translate_batch(body: BatchTranslateRequest):
    client = _client()
    try:
        translated = client.translate_batch(body.texts, body.target_language, body.source_language)
    except Exception as e:
        print("Batch translation API error:", e)
        raise HTTPException(status_code=500, detail=f"Batch translation failed: {e}")
    return {"translated_texts": translated}


@router.get("")
async def translation_cache_stats():
    return {"message": "Translation API endpoint", "cache_stats": _client().cache_stats()}


@router.delete("")
async def clear_translation_cache():
    _client().clear_cache()
    return {"message": "Translation cache cleared successfully"}
