"""
Ingredient extraction for shopping lists.

AI output here is best effort: when Gemini's reply cannot be parsed or
lacks the requested keys, an empty result is returned and the client
falls back to its own simple extraction. Errors calling the API itself
are not swallowed.
"""
import hashlib
import json
from typing import Any, Dict, List, Optional

from mealplanner.models.preferences import WEEKDAYS
from mealplanner.models.schemas import DayWiseMeals, IngredientExtractionResult, ShoppingList
from mealplanner.services.gemini_client import generate_text
from mealplanner.services.llm_json import ParseFailurePolicy, parse_model_json
from mealplanner.services.logger import log_debug

CATEGORIES = [
    "Vegetables",
    "Fruits",
    "Dairy & Eggs",
    "Meat & Seafood",
    "Grains & Pulses",
    "Spices & Herbs",
    "Pantry Items",
    "Other",
]

QUANTITY_RULES = """
For each ingredient, provide realistic quantities based on the number of portions. Use appropriate units (grams, kilograms, pieces, cups, etc.).

Focus on the main ingredients that would be needed for shopping. Avoid secondary ingredients. Add packed spices as separate ingredients.

Categorize ingredients into these types: {categories}
""".strip()

EXTRACTION_EXAMPLE = """
Example response format:
{
  "grouped": [
    {"Baigan Fry": ["brinjal 500g", "onions 200g", "tomatoes 300g"]},
    {"Paneer Sabji": ["paneer 250g", "onions 200g", "tomatoes 300g"]}
  ],
  "consolidated": ["brinjal", "paneer", "onions", "tomatoes"],
  "weights": {
    "brinjal": {"amount": 500, "unit": "g"},
    "onions": {"amount": 400, "unit": "g"}
  },
  "categorized": {
    "Vegetables": [{"name": "brinjal", "amount": 500, "unit": "g"}],
    "Dairy & Eggs": [{"name": "paneer", "amount": 250, "unit": "g"}]
  }
}

Return only the JSON object, nothing else.
""".strip()

SHOPPING_LIST_EXAMPLE = """
Example response format:
{
  "dayWise": {
    "monday": {
      "breakfast": {
        "name": "Dosa",
        "ingredients": [
          {"name": "rice", "amount": 500, "unit": "g"},
          {"name": "urad dal", "amount": 150, "unit": "g"}
        ]
      }
    }
  },
  "categorized": {
    "Vegetables": [{"name": "onions", "amount": 600, "unit": "g"}],
    "Dairy & Eggs": [{"name": "paneer", "amount": 250, "unit": "g"}]
  }
}

Return only the JSON object, nothing else.
""".strip()


def _render_meals(meals: List[str], day_wise_meals: Optional[DayWiseMeals]) -> str:
    if not day_wise_meals:
        return f"Meal names: {', '.join(meals)}"

    lines = ["Day-wise meals:"]
    for day in WEEKDAYS:
        by_type = day_wise_meals.get(day) or {}
        named = [(t, n) for t, n in by_type.items() if n and str(n).strip()]
        if not named:
            continue
        lines.append(f"{day.capitalize()}:")
        lines.extend(f"  - {meal_type}: {name}" for meal_type, name in named)
    return "\n".join(lines)


def build_extraction_prompt(
    meals: List[str],
    portions: int = 1,
    day_wise_meals: Optional[DayWiseMeals] = None,
) -> str:
    properties = []
    if day_wise_meals:
        properties.append('"dayWise": An object where each day contains meals with their ingredients')
    properties += [
        '"grouped": An array of objects where each object has the meal name as key '
        "and an array of ingredients with quantities as value",
        '"consolidated": An array of all unique ingredients needed for all meals',
        '"weights": An object where each ingredient is mapped to its total quantity needed (amount and unit)',
        '"categorized": An object where ingredients are grouped by type with their quantities',
    ]
    numbered = "\n".join(f"{i}. {p}" for i, p in enumerate(properties, start=1))

    return "\n\n".join([
        "You are a helpful cooking assistant. Given a list of meal names and the number of portions, "
        "extract the main ingredients needed to cook these dishes with their quantities.",
        f"Number of portions: {portions}",
        _render_meals(meals, day_wise_meals),
        f"Please return a JSON object with the following properties:\n{numbered}",
        QUANTITY_RULES.format(categories=", ".join(f'"{c}"' for c in CATEGORIES)),
        EXTRACTION_EXAMPLE,
    ])


def _dedupe(items: List[Any]) -> List[str]:
    seen = set()
    out = []
    for item in items:
        if not isinstance(item, str):
            continue
        key = item.strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        out.append(item.strip())
    return out


def _object_or(value: Any, default):
    return value if isinstance(value, dict) else default


def extract_ingredients(
    meals: List[str],
    portions: int = 1,
    day_wise_meals: Optional[DayWiseMeals] = None,
    model=None,
) -> IngredientExtractionResult:
    prompt = build_extraction_prompt(meals, portions, day_wise_meals)
    text = generate_text(prompt, model=model)

    parsed = parse_model_json(text, on_parse_failure=ParseFailurePolicy.EMPTY_RESULT)
    if parsed is None:
        print("Error parsing AI ingredient response, returning empty result")
        log_debug("ingredient_extraction_unparsed", {"raw": text})
        return IngredientExtractionResult.empty()

    grouped = parsed.get("grouped")
    consolidated = parsed.get("consolidated")
    if not isinstance(grouped, list) or not isinstance(consolidated, list):
        log_debug("ingredient_extraction_bad_shape", {"keys": sorted(parsed.keys())})
        return IngredientExtractionResult.empty()

    return IngredientExtractionResult(
        grouped=[g for g in grouped if isinstance(g, dict)],
        consolidated=_dedupe(consolidated),
        weights=_object_or(parsed.get("weights"), {}),
        categorized=_object_or(parsed.get("categorized"), {}),
        day_wise=_object_or(parsed.get("dayWise"), None),
    )


# -------------------------
# Shopping list (categorized)
# -------------------------
def meal_plan_hash(meals: List[str], day_wise_meals: DayWiseMeals, portions: int) -> str:
    """Stable SHA-256 of a week's meals, used to reuse a stored shopping list."""
    normalized = {
        "meals": sorted(meals),
        "dayWiseMeals": {
            day: dict(sorted((day_wise_meals[day] or {}).items()))
            for day in sorted(day_wise_meals)
        },
        "portions": portions,
    }
    data = json.dumps(normalized, sort_keys=True, ensure_ascii=False, separators=(",", ":"))
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def build_shopping_list_prompt(day_wise_meals: DayWiseMeals, portions: int = 1) -> str:
    return "\n\n".join([
        "You are a helpful cooking assistant. Given a list of meal names and the number of portions, "
        "extract the main ingredients needed to cook these dishes with their quantities.",
        f"Number of portions: {portions}",
        _render_meals([], day_wise_meals),
        "Please return a JSON object with the following properties:\n"
        '1. "dayWise": An object where each day contains meals with their ingredients\n'
        '2. "categorized": An object where ingredients are grouped by type with their quantities',
        QUANTITY_RULES.format(categories=", ".join(f'"{c}"' for c in CATEGORIES)),
        SHOPPING_LIST_EXAMPLE,
    ])


def build_shopping_list(
    day_wise_meals: DayWiseMeals,
    portions: int = 1,
    model=None,
) -> ShoppingList:
    prompt = build_shopping_list_prompt(day_wise_meals, portions)
    text = generate_text(prompt, model=model)

    parsed = parse_model_json(text, on_parse_failure=ParseFailurePolicy.EMPTY_RESULT)
    if parsed is None or not isinstance(parsed.get("categorized"), dict):
        print("Error parsing AI shopping list response, returning empty result")
        log_debug("shopping_list_unparsed", {"raw": text})
        return ShoppingList()

    return ShoppingList(
        categorized=parsed["categorized"],
        day_wise=_object_or(parsed.get("dayWise"), None),
    )
