# mealplanner/services/meal_suggester.py
from typing import Any, Dict

from mealplanner.services.gemini_client import generate_text
from mealplanner.services.llm_json import ParseFailurePolicy, parse_model_json
from mealplanner.services.logger import log_debug


def generate_meal_suggestions(prompt: str, model=None) -> Dict[str, Any]:
    """
    Send the weekly plan prompt to Gemini and return the parsed plan
    (weekday -> meal type -> name or {name, calories}).

    One request, no retry. API errors propagate; a reply without a JSON
    object raises InvalidAIResponseError. The shape of the object is not
    checked here.
    """
    text = generate_text(prompt, model=model)
    log_debug("meal_suggestions_response", {"prompt_chars": len(prompt), "response_chars": len(text)})

    return parse_model_json(text, on_parse_failure=ParseFailurePolicy.RAISE)
