import unittest
from types import SimpleNamespace

from mealplanner.services.llm_json import InvalidAIResponseError
from mealplanner.services.meal_plan_pipeline import build_meal_plan, has_enough_context, plan_days, user_preferences
from mealplanner.services.meal_suggester import generate_meal_suggestions
from mealplanner.services.prompt_builder import NO_DIETARY_PREFERENCES, VEGETARIAN_RULE


class FakeModel:
    """Stands in for genai.GenerativeModel."""

    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.prompts = []

    def generate_content(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return SimpleNamespace(text=self.text)


class TestGenerateMealSuggestions(unittest.TestCase):
    def test_prose_wrapped_reply(self):
        model = FakeModel('Here you go!\n```json\n{"monday": {"lunch": "Rajma Chawal"}}\n```\nEnjoy.')
        result = generate_meal_suggestions("plan my week", model=model)
        self.assertEqual(result, {"monday": {"lunch": "Rajma Chawal"}})
        self.assertEqual(model.prompts, ["plan my week"])

    def test_calorie_entries_kept(self):
        model = FakeModel('{"monday": {"dinner": {"name": "Khichdi", "calories": 420}}}')
        result = generate_meal_suggestions("plan", model=model)
        self.assertEqual(result["monday"]["dinner"], {"name": "Khichdi", "calories": 420})

    def test_non_json_reply(self):
        with self.assertRaises(InvalidAIResponseError) as ctx:
            generate_meal_suggestions("plan", model=FakeModel("Sorry, I can't do that."))
        self.assertIn("Invalid AI response format", str(ctx.exception))

    def test_empty_reply(self):
        with self.assertRaises(InvalidAIResponseError):
            generate_meal_suggestions("plan", model=FakeModel(None))

    def test_api_error_propagates(self):
        with self.assertRaises(RuntimeError):
            generate_meal_suggestions("plan", model=FakeModel(error=RuntimeError("quota exceeded")))


class TestMealPlanPipeline(unittest.TestCase):
    def test_user_preferences_defaults(self):
        prefs = user_preferences({})
        self.assertIsNone(prefs["dietary_preferences"])
        self.assertEqual(prefs["cuisine_preferences"], [])
        self.assertFalse(prefs["dish_preferences"].is_complete())
        self.assertEqual(prefs["meal_settings"].enabled_meal_types, ["breakfast", "lunch", "dinner"])
        self.assertEqual(prefs["ingredients"], [])

    def test_invalid_fields_fall_back(self):
        prefs = user_preferences({
            "dietary_preferences": {"daily_calorie_target": -5},
            "meal_settings": {"enabled_meal_types": []},
            "dish_preferences": "dosa",
        })
        self.assertIsNone(prefs["dietary_preferences"].daily_calorie_target)
        self.assertEqual(prefs["meal_settings"].enabled_meal_types, ["breakfast", "lunch", "dinner"])
        self.assertFalse(prefs["dish_preferences"].is_complete())

    def test_bad_field_keeps_vegetarian_rule(self):
        user = {
            "cuisine_preferences": ["Gujarati"],
            "dietary_preferences": {
                "is_vegetarian": True,
                "gluten_free": True,
                "daily_calorie_target": 0,
                "non_veg_days": "monday",
            },
        }
        dietary = user_preferences(user)["dietary_preferences"]
        self.assertTrue(dietary.is_vegetarian)
        self.assertTrue(dietary.gluten_free)
        self.assertIsNone(dietary.daily_calorie_target)
        self.assertIsNone(dietary.non_veg_days)

        model = FakeModel('{"monday": {"lunch": "Dal Dhokli"}}')
        build_meal_plan(user, "2024-07-01", [], model=model)
        self.assertIn(VEGETARIAN_RULE, model.prompts[0])
        self.assertNotIn(NO_DIETARY_PREFERENCES, model.prompts[0])

    def test_unknown_weekdays_dropped(self):
        dietary = user_preferences({
            "dietary_preferences": {"non_veg_days": [" Friday", "funday", "SUNDAY"]},
        })["dietary_preferences"]
        self.assertEqual(dietary.non_veg_days, ["friday", "sunday"])

    def test_has_enough_context(self):
        self.assertFalse(has_enough_context([], user_preferences({})))
        self.assertTrue(has_enough_context([{"week_start_date": "2024-06-24"}], user_preferences({})))
        self.assertTrue(has_enough_context([], user_preferences({"cuisine_preferences": ["Bengali"]})))

    def test_dish_context_needs_both_lists(self):
        half = user_preferences({"dish_preferences": {"breakfast": ["Upma"]}})
        self.assertFalse(has_enough_context([], half))

        full = user_preferences({"dish_preferences": {"breakfast": ["Upma"], "lunch_dinner": ["Avial"]}})
        self.assertTrue(has_enough_context([], full))

    def test_build_uses_stored_pantry_unless_overridden(self):
        user = {"cuisine_preferences": ["Punjabi"], "ingredients": ["paneer"]}

        model = FakeModel('{"monday": {"lunch": "Paneer Tikka"}}')
        build_meal_plan(user, "2024-07-01", [], model=model)
        self.assertIn("at least one dish: paneer", model.prompts[0])

        model = FakeModel('{"monday": {"lunch": "Aloo Gobi"}}')
        build_meal_plan(user, "2024-07-01", [], ingredients=[], model=model)
        self.assertNotIn("Must use all of the following ingredients", model.prompts[0])

    def test_plan_days(self):
        self.assertEqual(
            plan_days({"monday": {"lunch": "Dal"}, "notes": "x", "funday": {"lunch": "?"}}),
            {"monday": {"lunch": "Dal"}},
        )
        self.assertEqual(plan_days({"meals": {"friday": {"dinner": "Pulao"}}}), {"friday": {"dinner": "Pulao"}})
        self.assertEqual(plan_days({"meals": "none"}), {})


if __name__ == '__main__':
    unittest.main()
