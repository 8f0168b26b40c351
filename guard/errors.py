"""
Exceptions raised by guard.
"""

from __future__ import annotations

from typing import Iterable

from .types import Issue


class GuardError(Exception):
    """Base class for all guard exceptions."""


class ValidationError(GuardError, ValueError):
    """
    Raised by parse()/coerce() when a value fails validation.

    Wraps the full, non-empty tuple of issues. The message joins every issue
    as ``path.segments: message`` with ``"; "``.
    """

    def __init__(self, issues: Iterable[Issue]):
        self.issues: tuple[Issue, ...] = tuple(issues)
        if not self.issues:
            raise ValueError("ValidationError requires at least one issue")
        super().__init__("; ".join(str(issue) for issue in self.issues))

    def flatten(self) -> dict[str, list[str]]:
        """
        Group messages by their top-level field.

        Issues at the root are collected under the empty string key.
        """
        grouped: dict[str, list[str]] = {}
        for issue in self.issues:
            key = str(issue.path[0]) if issue.path else ""
            grouped.setdefault(key, []).append(issue.message)
        return grouped


class SchemaError(GuardError, TypeError):
    """Raised at construction time when a schema is misconfigured."""
