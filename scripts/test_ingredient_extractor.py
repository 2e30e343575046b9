import json
import unittest
from types import SimpleNamespace

from mealplanner.services.ingredient_extractor import (
    build_extraction_prompt,
    build_shopping_list,
    extract_ingredients,
    meal_plan_hash,
)


class FakeModel:
    def __init__(self, text):
        self.text = text
        self.prompts = []

    def generate_content(self, prompt):
        self.prompts.append(prompt)
        return SimpleNamespace(text=self.text)


VALID_REPLY = """Sure, here are the ingredients:
{
  "grouped": [{"Paneer Butter Masala": ["paneer 250g", "tomatoes 300g"]}, "stray"],
  "consolidated": ["paneer", "Tomatoes", "tomatoes ", "", 3],
  "weights": {"paneer": {"amount": 250, "unit": "g"}},
  "categorized": {"Dairy & Eggs": [{"name": "paneer", "amount": 250, "unit": "g"}]}
}
Happy cooking!"""


class TestExtractIngredients(unittest.TestCase):
    def test_valid_reply(self):
        result = extract_ingredients(["Paneer Butter Masala"], portions=2, model=FakeModel(VALID_REPLY))

        self.assertEqual(result.grouped, [{"Paneer Butter Masala": ["paneer 250g", "tomatoes 300g"]}])
        self.assertEqual(result.consolidated, ["paneer", "Tomatoes"])
        self.assertEqual(result.weights["paneer"], {"amount": 250, "unit": "g"})
        self.assertIn("Dairy & Eggs", result.categorized)
        self.assertIsNone(result.day_wise)

    def test_malformed_reply_is_empty(self):
        result = extract_ingredients(["Dal"], model=FakeModel("I am not sure about these dishes."))
        self.assertEqual(result.grouped, [])
        self.assertEqual(result.consolidated, [])
        self.assertEqual(result.weights, {})
        self.assertEqual(result.categorized, {})

    def test_missing_keys_is_empty(self):
        result = extract_ingredients(["Dal"], model=FakeModel('{"ingredients": ["dal", "rice"]}'))
        self.assertEqual(result.consolidated, [])
        self.assertEqual(result.grouped, [])

    def test_wrong_types_is_empty(self):
        reply = json.dumps({"grouped": {"Dal": ["dal"]}, "consolidated": ["dal"]})
        result = extract_ingredients(["Dal"], model=FakeModel(reply))
        self.assertEqual(result.grouped, [])

    def test_day_wise_reply(self):
        reply = json.dumps({
            "dayWise": {"monday": {"lunch": {"name": "Dal", "ingredients": []}}},
            "grouped": [],
            "consolidated": ["toor dal"],
        })
        result = extract_ingredients(
            ["Dal"],
            day_wise_meals={"monday": {"lunch": "Dal"}},
            model=FakeModel(reply),
        )
        self.assertEqual(result.day_wise, {"monday": {"lunch": {"name": "Dal", "ingredients": []}}})
        self.assertEqual(result.consolidated, ["toor dal"])


class TestExtractionPrompt(unittest.TestCase):
    def test_meal_names(self):
        prompt = build_extraction_prompt(["Dosa", "Sambar"], portions=4)
        self.assertIn("Number of portions: 4", prompt)
        self.assertIn("Meal names: Dosa, Sambar", prompt)
        self.assertNotIn('"dayWise"', prompt.split("Example response format")[0])

    def test_day_wise_layout(self):
        prompt = build_extraction_prompt(
            [],
            day_wise_meals={"tuesday": {"dinner": "Pulao"}, "monday": {"breakfast": "Poha", "lunch": ""}},
        )
        self.assertIn("Monday:\n  - breakfast: Poha\nTuesday:\n  - dinner: Pulao", prompt)
        self.assertIn('1. "dayWise"', prompt)


class TestShoppingList(unittest.TestCase):
    def test_hash_is_order_independent(self):
        a = meal_plan_hash(
            ["Dal", "Poha"],
            {"monday": {"breakfast": "Poha", "lunch": "Dal"}, "tuesday": {"dinner": "Pulao"}},
            2,
        )
        b = meal_plan_hash(
            ["Poha", "Dal"],
            {"tuesday": {"dinner": "Pulao"}, "monday": {"lunch": "Dal", "breakfast": "Poha"}},
            2,
        )
        self.assertEqual(a, b)
        self.assertEqual(len(a), 64)

    def test_hash_changes_with_portions_and_meals(self):
        day_wise = {"monday": {"lunch": "Dal"}}
        base = meal_plan_hash(["Dal"], day_wise, 2)
        self.assertNotEqual(base, meal_plan_hash(["Dal"], day_wise, 3))
        self.assertNotEqual(base, meal_plan_hash(["Dal"], {"monday": {"lunch": "Rajma"}}, 2))

    def test_build_shopping_list(self):
        reply = json.dumps({
            "dayWise": {"monday": {"lunch": {"name": "Dal", "ingredients": []}}},
            "categorized": {"Grains & Pulses": [{"name": "toor dal", "amount": 200, "unit": "g"}]},
        })
        result = build_shopping_list({"monday": {"lunch": "Dal"}}, portions=2, model=FakeModel(reply))
        self.assertEqual(result.categorized["Grains & Pulses"][0]["name"], "toor dal")
        self.assertIn("monday", result.day_wise)
        self.assertFalse(result.cached)

    def test_unparseable_shopping_list_is_empty(self):
        result = build_shopping_list({"monday": {"lunch": "Dal"}}, model=FakeModel("no idea"))
        self.assertEqual(result.categorized, {})
        self.assertIsNone(result.day_wise)


if __name__ == '__main__':
    unittest.main()
