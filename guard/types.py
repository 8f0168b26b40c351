"""
Type definitions for guard.

Provides the Ok/Err result pair, the Issue record, and the MISSING sentinel.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")


class _Missing(Enum):
    """
    Sentinel for "no value at all".

    An absent object key evaluates as MISSING. It is distinct from None,
    which is what a JSON null deserializes to.
    """

    MISSING = "MISSING"

    def __repr__(self) -> str:
        return "MISSING"


MISSING = _Missing.MISSING


@dataclass(frozen=True, slots=True)
class Issue:
    """One validation failure at a location inside the input."""

    path: Path
    message: str
    expected: str | None = None
    received: str | None = None

    def __str__(self) -> str:
        if self.path:
            return f"{format_path(self.path)}: {self.message}"
        return self.message


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success result containing a value."""

    value: T

    @property
    def ok(self) -> bool:
        return True

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Err:
    """Error result containing a non-empty tuple of issues."""

    issues: tuple[Issue, ...]

    def __post_init__(self) -> None:
        issues = tuple(self.issues)
        if not issues:
            raise ValueError("Err requires at least one issue")
        object.__setattr__(self, "issues", issues)

    @property
    def ok(self) -> bool:
        return False

    @property
    def error(self) -> tuple[Issue, ...]:
        return self.issues

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True


def format_path(path: Path) -> str:
    """Render a path as dotted segments, e.g. ``users.0.name``."""
    return ".".join(str(segment) for segment in path)


# Type aliases
Path = tuple[Union[str, int], ...]
ParseResult = Union[Ok[Any], Err]
CheckFn = Callable[[Any], bool]
