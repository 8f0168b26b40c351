"""
Coercion rules applied by leaf validators when coercion is enabled.

Each rule returns the converted value, or the input unchanged when no
conversion applies. Leaves re-check the base kind afterwards, so an
unconverted value simply fails there.

The rules follow JSON/JavaScript conventions rather than Python's own
``str()``/``float()`` parsing: ``"1_000"`` and ``"inf"`` are not numbers,
``[1, 2]`` becomes ``"1,2"`` and numeric dates are epoch milliseconds.
"""

import math
import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from ..types import MISSING

_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_RADIX = re.compile(r"0([xXoObB])([0-9a-zA-Z]+)")
_BASES = {"x": 16, "o": 8, "b": 2}
_INFINITIES = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}


def is_number(value: Any) -> bool:
    """True for int/float values, excluding bool."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def number_to_string(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, float) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return str(value)


def to_string(value: Any) -> Any:
    if value is MISSING or value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if is_number(value):
        return number_to_string(value)
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return ",".join(to_string(item) for item in value)
    if isinstance(value, Mapping):
        return str(dict(value))
    return str(value)


def parse_number(text: str) -> float | None:
    """
    Read numeric text the way JSON-facing callers write it.

    Accepts decimal literals (with optional sign, fraction and exponent),
    ``0x``/``0o``/``0b`` integers, and ``Infinity`` with an optional sign.
    Surrounding whitespace is ignored and blank text reads as 0. Returns
    None for anything else, including ``nan``, ``inf`` and ``1_000``.
    """
    text = text.strip()
    if not text:
        return 0
    if text in _INFINITIES:
        return _INFINITIES[text]

    radix = _RADIX.fullmatch(text)
    if radix is not None:
        prefix, digits = radix.groups()
        try:
            return int(digits, _BASES[prefix.lower()])
        except ValueError:
            return None

    if _DECIMAL.fullmatch(text) is None:
        return None
    if not any(c in text for c in ".eE"):
        try:
            return int(text)
        except ValueError:
            # too many digits for int(); fall through to float
            pass
    return float(text)


def to_number(value: Any) -> Any:
    if isinstance(value, bool):
        return 1 if value else 0
    if not isinstance(value, str):
        return value
    number = parse_number(value)
    return value if number is None else number


def to_boolean(value: Any) -> Any:
    if value == "true" or (is_number(value) and value == 1):
        return True
    if value == "false" or (is_number(value) and value == 0):
        return False
    return value


def to_date(value: Any) -> Any:
    if isinstance(value, str):
        text = value.strip()
        # fromisoformat() only learned the "Z" suffix in 3.11
        if text[-1:] in ("Z", "z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return value
    if is_number(value):
        # epoch milliseconds, as produced by JSON serializers
        try:
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return value
    return value
