"""
Helper functions for describing received values in issues.
"""

import json
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from ..types import MISSING


def kind_of(value: Any) -> str:
    """Name the JSON-level kind of a runtime value (e.g. "string", "array")."""
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, datetime):
        return "date"
    return type(value).__name__


def render(value: Any) -> str:
    """Render a value for diagnostics, JSON-style where possible."""
    if value is MISSING:
        return "undefined"
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)
