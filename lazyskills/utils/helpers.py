"""Utility functions for lazyskills."""

import json
from typing import Any


def safe_json_loads(s: str, default: Any = None) -> Any:
    """Safely parse JSON string, returning default on failure."""
    try:
        return json.loads(s)
    except (json.JSONDecodeError, TypeError):
        return default if default is not None else {}
