import unittest

from mealplanner.services.llm_json import (
    InvalidAIResponseError,
    ParseFailurePolicy,
    balanced_brace_spans,
    extract_json_object,
    parse_model_json,
    strip_code_fences,
)


class TestExtractJsonObject(unittest.TestCase):
    def test_plain_json(self):
        self.assertEqual(extract_json_object('{"monday": {"lunch": "Dal"}}'), {"monday": {"lunch": "Dal"}})

    def test_code_fence(self):
        text = '```json\n{"monday": {"lunch": "Dal"}}\n```'
        self.assertEqual(strip_code_fences(text), '{"monday": {"lunch": "Dal"}}')
        self.assertEqual(extract_json_object(text), {"monday": {"lunch": "Dal"}})

    def test_prose_around_json(self):
        text = 'Here is your plan:\n{"monday": {"breakfast": "Poha"}}\nEnjoy your week!'
        self.assertEqual(extract_json_object(text), {"monday": {"breakfast": "Poha"}})

    def test_braces_inside_strings(self):
        text = 'Sure! {"monday": {"dinner": "Curry {spicy}"}} Let me know {if} you need more.'
        self.assertEqual(extract_json_object(text), {"monday": {"dinner": "Curry {spicy}"}})

    def test_largest_valid_span_wins(self):
        text = 'Note {"a": 1} and the plan {"monday": {"lunch": "Rajma"}, "tuesday": {"lunch": "Kadhi"}}'
        self.assertEqual(
            extract_json_object(text),
            {"monday": {"lunch": "Rajma"}, "tuesday": {"lunch": "Kadhi"}},
        )

    def test_spans_are_ordered_by_size(self):
        spans = balanced_brace_spans('{"a": 1} text {"bb": {"c": 2}}')
        self.assertEqual(spans, ['{"bb": {"c": 2}}', '{"a": 1}'])

    def test_non_object_json_is_rejected(self):
        self.assertIsNone(extract_json_object('["Dal", "Rice"]'))

    def test_no_json(self):
        self.assertIsNone(extract_json_object("I cannot help with that."))
        self.assertIsNone(extract_json_object(""))
        self.assertIsNone(extract_json_object(None))

    def test_unbalanced_json(self):
        self.assertIsNone(extract_json_object('{"monday": {"lunch": "Dal"'))


class TestParseModelJson(unittest.TestCase):
    def test_raise_policy(self):
        with self.assertRaises(InvalidAIResponseError) as ctx:
            parse_model_json("no json here")
        self.assertIn("Invalid AI response format", str(ctx.exception))
        self.assertEqual(ctx.exception.raw, "no json here")

    def test_empty_result_policy(self):
        self.assertIsNone(parse_model_json("no json here", on_parse_failure=ParseFailurePolicy.EMPTY_RESULT))

    def test_success_ignores_policy(self):
        for policy in ParseFailurePolicy:
            self.assertEqual(parse_model_json('{"ok": true}', on_parse_failure=policy), {"ok": True})

    def test_error_is_value_error(self):
        self.assertTrue(issubclass(InvalidAIResponseError, ValueError))


if __name__ == '__main__':
    unittest.main()
