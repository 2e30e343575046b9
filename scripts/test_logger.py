import io
import json
import unittest
from contextlib import redirect_stdout
from unittest.mock import patch

from mealplanner.core.config import settings
from mealplanner.services.logger import MAX_LOGGED_CHARS, log_debug


class TestLogDebug(unittest.TestCase):
    def _capture(self, event, data):
        out = io.StringIO()
        with redirect_stdout(out):
            log_debug(event, data)
        return out.getvalue()

    def test_silent_when_disabled(self):
        with patch.object(settings, "AI_DEBUG_MODE", False):
            self.assertEqual(self._capture("x", {"a": 1}), "")

    def test_structured_entry(self):
        with patch.object(settings, "AI_DEBUG_MODE", True):
            output = self._capture("shopping_list_unparsed", {"raw": "x" * (MAX_LOGGED_CHARS + 10), "n": 2})

        header, body = output.strip().split("\n", 1)
        self.assertEqual(header, "[AI DEBUG] shopping_list_unparsed:")
        entry = json.loads(body)
        self.assertEqual(entry["event"], "shopping_list_unparsed")
        self.assertEqual(entry["data"]["n"], 2)
        self.assertTrue(entry["data"]["raw"].endswith("[10 more chars]"))


if __name__ == '__main__':
    unittest.main()
