# mealplanner/services/gemini_client.py
import google.generativeai as genai

from mealplanner.core.config import settings

_model = None


def get_model():
    """
    Shared Gemini model, configured on first use so importing this module
    does not require an API key.
    """
    global _model
    if _model is not None:
        return _model

    if not settings.GEMINI_API_KEY:
        raise RuntimeError(
            "Gemini API key not found. Set GEMINI_API_KEY (or GOOGLE_API_KEY) in .env "
            "or as an environment variable."
        )

    genai.configure(api_key=settings.GEMINI_API_KEY)
    _model = genai.GenerativeModel(settings.GEMINI_MODEL)
    return _model


def generate_text(prompt: str, model=None) -> str:
    """Single non-streaming completion. API errors propagate to the caller."""
    model = model or get_model()
    response = model.generate_content(prompt)
    return (response.text or "").strip()
