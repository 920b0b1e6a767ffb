# carwash/utils/json_parser.py
"""
JSON helpers for the persistence slots and external API payloads.
Slots hold whole collections as JSON documents.
"""

import json
from typing import Any, Optional


def safe_parse_json(raw: str | bytes) -> Optional[Any]:
    """Parse JSON text safely. Returns None on error."""
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return None


def dump_json(payload: Any) -> str:
    """Compact, UTF-8 friendly serialization (keeps accents readable in the DB)."""
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def get_nested(data: Any, *keys: str | int, default: Any = None) -> Any:
    """Safely navigate nested dict keys / list indexes. Returns default if any step is missing."""
    current = data
    for key in keys:
        if isinstance(key, int):
            if not isinstance(current, list) or not -len(current) <= key < len(current):
                return default
            current = current[key]
        else:
            if not isinstance(current, dict) or key not in current:
                return default
            current = current[key]
    return current
