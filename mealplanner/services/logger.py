import json
from datetime import datetime
from typing import Any

from mealplanner.core.config import settings

# Raw model replies can be several KB; keep debug output readable
MAX_LOGGED_CHARS = 2000


def _clip(value: Any) -> Any:
    if isinstance(value, str) and len(value) > MAX_LOGGED_CHARS:
        return value[:MAX_LOGGED_CHARS] + f"... [{len(value) - MAX_LOGGED_CHARS} more chars]"
    if isinstance(value, dict):
        return {k: _clip(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_clip(v) for v in value]
    return value


def log_debug(event: str, data: dict):
    """
    Print a structured debug entry when AI_DEBUG_MODE is on
    (prompt sizes, unparsed model replies, cache hits, cron summaries).
    """
    if not settings.AI_DEBUG_MODE:
        return

    entry = {
        "timestamp": datetime.now().isoformat(),
        "event": event,
        "data": _clip(data),
    }

    print(f"\n[AI DEBUG] {event}:")
    print(json.dumps(entry, indent=2, default=str, ensure_ascii=False))
