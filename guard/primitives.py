"""
Leaf validators for guard.

Leaves inspect a raw value, optionally coerce it toward their kind, check the
kind, then run their attached checks in order (first failure wins).
"""

from __future__ import annotations

import enum
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from urllib.parse import urlparse

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .core import Check, Checked, Schema, run_checks, type_error
from .lib.coercion import is_number, to_boolean, to_date, to_number, to_string
from .lib.formatting import kind_of, render
from .types import MISSING, Err, Issue, Ok, ParseResult, Path

_EMAIL = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def literal_key(value: Any) -> tuple[str, Any]:
    """
    Key under which a literal value compares equal.

    Numbers share one kind so 1 and 1.0 match; bool is its own kind so
    True never matches 1.
    """
    if isinstance(value, bool):
        return ("boolean", value)
    if is_number(value):
        return ("number", value)
    return (type(value).__qualname__, value)


def _is_url(value: str) -> bool:
    """Absolute URL: a scheme followed by something (``mailto:`` and ``urn:`` too)."""
    try:
        parts = urlparse(value.strip())
    except ValueError:
        return False
    if not parts.scheme:
        return False
    rest = value.strip()[len(parts.scheme) + 1 :]
    return bool(rest.strip("/"))


@dataclass(frozen=True, slots=True)
class StringSchema(Checked, Schema):
    checks: tuple[Check, ...] = ()

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if coerce and not isinstance(value, str):
            value = to_string(value)
        if not isinstance(value, str):
            return type_error(path, "string", kind_of(value))
        return run_checks(self.checks, value, path)

    def min(self, n: int) -> StringSchema:
        return self._add(
            lambda v: len(v) >= n,
            f"String must be at least {n} characters",
            f"min({n})",
        )

    def max(self, n: int) -> StringSchema:
        return self._add(
            lambda v: len(v) <= n, f"String must be at most {n} characters", f"max({n})"
        )

    def length(self, n: int) -> StringSchema:
        return self._add(
            lambda v: len(v) == n,
            f"String must be exactly {n} characters",
            f"length({n})",
        )

    def nonempty(self) -> StringSchema:
        return self.min(1)

    def pattern(self, regex: str | re.Pattern[str]) -> StringSchema:
        """Require a regex match anywhere in the string (anchor it yourself)."""
        compiled = re.compile(regex)
        return self._add(
            lambda v: compiled.search(v) is not None,
            f"String must match pattern {compiled.pattern}",
            f"pattern({compiled.pattern})",
        )

    def email(self) -> StringSchema:
        """Permissive ``local@domain.tld`` check, not full RFC 5322."""
        return self._add(
            lambda v: _EMAIL.fullmatch(v) is not None, "Invalid email address", "email"
        )

    def url(self) -> StringSchema:
        return self._add(_is_url, "Invalid URL", "url")

    def starts_with(self, prefix: str) -> StringSchema:
        return self._add(
            lambda v: v.startswith(prefix),
            f'String must start with "{prefix}"',
            f'starts_with("{prefix}")',
        )

    def ends_with(self, suffix: str) -> StringSchema:
        return self._add(
            lambda v: v.endswith(suffix),
            f'String must end with "{suffix}"',
            f'ends_with("{suffix}")',
        )

    def includes(self, substring: str) -> StringSchema:
        return self._add(
            lambda v: substring in v,
            f'String must include "{substring}"',
            f'includes("{substring}")',
        )

    def trim(self):
        return self.transform(str.strip)

    def to_lower(self):
        return self.transform(str.lower)

    def to_upper(self):
        return self.transform(str.upper)


@dataclass(frozen=True, slots=True)
class NumberSchema(Checked, Schema):
    checks: tuple[Check, ...] = ()

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if coerce and not is_number(value):
            value = to_number(value)
        if not is_number(value) or (isinstance(value, float) and math.isnan(value)):
            return type_error(path, "number", kind_of(value))
        return run_checks(self.checks, value, path)

    def min(self, n: float) -> NumberSchema:
        return self._add(lambda v: v >= n, f"Number must be >= {n}", f"min({n})")

    def max(self, n: float) -> NumberSchema:
        return self._add(lambda v: v <= n, f"Number must be <= {n}", f"max({n})")

    def int(self) -> NumberSchema:
        return self._add(
            lambda v: isinstance(v, int) or v.is_integer(), "Expected integer", "int"
        )

    def positive(self) -> NumberSchema:
        return self._add(lambda v: v > 0, "Expected positive number", "positive")

    def negative(self) -> NumberSchema:
        return self._add(lambda v: v < 0, "Expected negative number", "negative")

    def nonnegative(self) -> NumberSchema:
        return self._add(
            lambda v: v >= 0, "Expected non-negative number", "nonnegative"
        )

    def nonpositive(self) -> NumberSchema:
        return self._add(
            lambda v: v <= 0, "Expected non-positive number", "nonpositive"
        )

    def finite(self) -> NumberSchema:
        return self._add(
            lambda v: isinstance(v, int) or math.isfinite(v),
            "Expected finite number",
            "finite",
        )

    def multiple_of(self, n: float) -> NumberSchema:
        """
        Require ``value % n == 0``.

        This is a floating-point remainder, so non-integer divisors are
        unreliable (``0.3 % 0.1`` is not 0).
        """
        if n == 0:
            raise ValueError("multiple_of() divisor must be non-zero")
        return self._add(
            lambda v: v % n == 0, f"Expected multiple of {n}", f"multiple_of({n})"
        )


@dataclass(frozen=True, slots=True)
class BooleanSchema(Schema):
    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if coerce and not isinstance(value, bool):
            value = to_boolean(value)
        if not isinstance(value, bool):
            return type_error(path, "boolean", kind_of(value))
        return Ok(value)


@dataclass(frozen=True, slots=True)
class DateSchema(Checked, Schema):
    checks: tuple[Check, ...] = ()

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if coerce and not isinstance(value, datetime):
            value = to_date(value)
        if not isinstance(value, datetime):
            return type_error(path, "date", kind_of(value), "Expected valid date")
        return run_checks(self.checks, value, path)

    def min(self, bound: datetime) -> DateSchema:
        instant = bound.timestamp()
        return self._add(
            lambda v: v.timestamp() >= instant,
            f"Date must be on or after {bound.isoformat()}",
        )

    def max(self, bound: datetime) -> DateSchema:
        instant = bound.timestamp()
        return self._add(
            lambda v: v.timestamp() <= instant,
            f"Date must be on or before {bound.isoformat()}",
        )


@dataclass(frozen=True, slots=True)
class LiteralSchema(Schema):
    value: Any

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if literal_key(value) != literal_key(self.value):
            expected = render(self.value)
            return Err(
                (Issue(path, f"Expected {expected}", expected, render(value)),)
            )
        return Ok(value)


@dataclass(frozen=True, slots=True)
class EnumSchema(Schema):
    values: tuple[str, ...]

    def __post_init__(self) -> None:
        values = tuple(self.values)
        for v in values:
            if not isinstance(v, str):
                raise TypeError(f"Enum values must be strings, got {type(v).__name__}")
        object.__setattr__(self, "values", values)

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if not isinstance(value, str) or value not in self.values:
            options = ", ".join(render(v) for v in self.values)
            return Err(
                (
                    Issue(
                        path,
                        f"Expected one of: {options}",
                        " | ".join(self.values),
                        render(value),
                    ),
                )
            )
        return Ok(value)

    def extract(self, *values: str) -> EnumSchema:
        """Narrow to the given members, keeping declaration order."""
        return EnumSchema(tuple(v for v in self.values if v in values))

    def exclude(self, *values: str) -> EnumSchema:
        return EnumSchema(tuple(v for v in self.values if v not in values))


@dataclass(frozen=True, slots=True)
class NativeEnumSchema(Schema):
    """
    Validate against the values of an existing enumeration.

    For an ``enum.Enum`` subclass the matching member is returned, given
    either the member itself or its value. For a plain mapping the matching
    value is returned unchanged.
    """

    enum_type: Any

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if isinstance(self.enum_type, type) and issubclass(self.enum_type, enum.Enum):
            if isinstance(value, self.enum_type):
                return Ok(value)
            key = literal_key(value)
            for member in self.enum_type:
                if literal_key(member.value) == key:
                    return Ok(member)
        else:
            key = literal_key(value)
            for candidate in self.enum_type.values():
                if literal_key(candidate) == key:
                    return Ok(candidate)

        options = ", ".join(render(v) for v in self.enum_values)
        return Err(
            (
                Issue(
                    path,
                    f"Expected one of enum values: {options}",
                    received=render(value),
                ),
            )
        )

    @property
    def enum_values(self) -> tuple[Any, ...]:
        if isinstance(self.enum_type, Mapping):
            return tuple(self.enum_type.values())
        return tuple(member.value for member in self.enum_type)


@dataclass(frozen=True, slots=True)
class AnySchema(Schema):
    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        return Ok(value)


@dataclass(frozen=True, slots=True)
class UnknownSchema(Schema):
    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        return Ok(value)


@dataclass(frozen=True, slots=True)
class NeverSchema(Schema):
    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        return Err(
            (Issue(path, "No value is allowed (never)", received=kind_of(value)),)
        )


@dataclass(frozen=True, slots=True)
class NullSchema(Schema):
    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if value is not None:
            return type_error(path, "null", kind_of(value))
        return Ok(None)


@dataclass(frozen=True, slots=True)
class UndefinedSchema(Schema):
    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if value is not MISSING:
            return type_error(path, "undefined", kind_of(value))
        return Ok(MISSING)


@dataclass(frozen=True, slots=True)
class InstanceOfSchema(Schema):
    cls: type

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if not isinstance(value, self.cls):
            name = self.cls.__name__
            return type_error(
                path, name, type(value).__name__, f"Expected instance of {name}"
            )
        return Ok(value)


@dataclass(frozen=True, slots=True)
class ModelSchema(Schema):
    """
    Validate through a Pydantic model.

    Instances of the model pass unchanged. Anything else goes through
    ``model_validate`` (strict unless coercing); each Pydantic error becomes
    one issue with its location appended to the current path.
    """

    model: type[BaseModel]

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if isinstance(value, self.model):
            return Ok(value)
        if value is MISSING:
            return type_error(path, "object", kind_of(value))

        try:
            return Ok(self.model.model_validate(value, strict=not coerce))
        except PydanticValidationError as e:
            return Err(
                tuple(
                    Issue(
                        (*path, *error["loc"]),
                        error["msg"],
                        expected=error["type"],
                        received=render(error["input"]) if "input" in error else None,
                    )
                    for error in e.errors()
                )
            )
