"""
Core schema classes for guard.

Every schema node is a frozen dataclass deriving from Schema. Calling a node
with ``(value, path, coerce)`` evaluates it and returns Ok or Err; the
parse/safe_parse/coerce/safe_coerce entry points and the modifier methods
are shared here.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, Callable

from .errors import ValidationError
from .types import MISSING, CheckFn, Err, Issue, Ok, ParseResult, Path

if TYPE_CHECKING:
    from .combinators import (
        DefaultSchema,
        IntersectionSchema,
        NullableSchema,
        OptionalSchema,
        PipeSchema,
        RefineSchema,
        TransformSchema,
        UnionSchema,
    )


class Schema:
    """
    Base class of every schema node.

    Subclasses are frozen dataclasses and implement ``__call__``. Modifier
    methods never mutate the receiver; they return a new node.
    """

    __slots__ = ()

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        """
        Evaluate the schema against a raw value.

        Returns:
            Ok(value) if validation passes
            Err(issues) if validation fails
        """
        raise NotImplementedError(f"{type(self).__name__} does not implement __call__")

    # Entry points

    def parse(self, value: Any) -> Any:
        """Validate and return the value, or raise ValidationError."""
        return unwrap_result(self(value, (), False))

    def safe_parse(self, value: Any) -> ParseResult:
        """Validate and return a result (never raises)."""
        return self(value, (), False)

    def coerce(self, value: Any) -> Any:
        """Validate with coercion enabled (e.g. "123" -> 123 for numbers)."""
        return unwrap_result(self(value, (), True))

    def safe_coerce(self, value: Any) -> ParseResult:
        """Validate with coercion enabled, returning a result."""
        return self(value, (), True)

    def is_valid(self, value: Any) -> bool:
        """Check if a value is valid without coercion."""
        return self(value, (), False).ok

    # Modifiers

    def optional(self) -> OptionalSchema:
        """Accept MISSING (an absent value) in addition to this schema."""
        # Import here to avoid circular dependency
        from .combinators import OptionalSchema

        return OptionalSchema(self)

    def nullable(self) -> NullableSchema:
        """Accept None in addition to this schema."""
        from .combinators import NullableSchema

        return NullableSchema(self)

    def default(
        self, value: Any = MISSING, *, factory: Callable[[], Any] | None = None
    ) -> DefaultSchema:
        """
        Substitute a default when the value is MISSING.

        Use ``factory`` for mutable defaults so every parse gets a fresh copy:
            Array(String()).default(factory=list)
        """
        from .combinators import DefaultSchema

        if (value is MISSING) == (factory is None):
            raise TypeError("default() takes exactly one of value or factory")
        return DefaultSchema(self, value, factory)

    def transform(self, fn: Callable[[Any], Any]) -> TransformSchema:
        """Map the validated value through ``fn``."""
        from .combinators import TransformSchema

        return TransformSchema(self, fn)

    def refine(self, check: CheckFn, message: str | None = None) -> RefineSchema:
        """Add a custom predicate that runs after this schema passes."""
        from .combinators import RefineSchema

        return RefineSchema(self, check, message or "Refinement check failed")

    def pipe(self, next_schema: Schema) -> PipeSchema:
        """Feed this schema's output into ``next_schema``."""
        from .combinators import PipeSchema

        if not isinstance(next_schema, Schema):
            raise TypeError(f"Cannot pipe into {type(next_schema).__name__}")
        return PipeSchema(self, next_schema)

    def __or__(self, other: Any) -> UnionSchema:
        """
        Combine with OR logic: the first matching variant wins.

        Usage:
            String() | Number()
            String() | None
        """
        from .combinators import UnionSchema
        from .validators import to_schema

        other_schema = to_schema(other)
        left = self.options if isinstance(self, UnionSchema) else (self,)
        return UnionSchema((*left, other_schema))

    def __ror__(self, other: Any) -> UnionSchema:
        """Support ``str | Number()`` where the plain type comes first."""
        from .validators import to_schema

        return to_schema(other) | self

    def __and__(self, other: Any) -> IntersectionSchema:
        """
        Combine with AND logic: both must pass.

        Usage:
            Object({"id": Number()}) & Object({"name": String()})
        """
        from .combinators import IntersectionSchema
        from .validators import to_schema

        return IntersectionSchema(self, to_schema(other))

    def __rand__(self, other: Any) -> IntersectionSchema:
        from .validators import to_schema

        return to_schema(other) & self


@dataclass(frozen=True, slots=True)
class Check:
    """A refinement attached to a leaf or array validator."""

    fn: CheckFn
    message: str
    expected: str | None = None


class Checked:
    """Mixin for schemas holding an ordered ``checks`` tuple."""

    __slots__ = ()

    def _add(self, fn: CheckFn, message: str, expected: str | None = None) -> Any:
        checks = self.checks  # type: ignore[attr-defined]
        return replace(self, checks=(*checks, Check(fn, message, expected)))


def run_checks(checks: tuple[Check, ...], value: Any, path: Path) -> ParseResult:
    """Run checks in order, stopping at the first failure."""
    for check in checks:
        if not check.fn(value):
            return Err((Issue(path, check.message, expected=check.expected),))
    return Ok(value)


def type_error(
    path: Path, expected: str, received: str, message: str | None = None
) -> Err:
    """Build the single shape-mismatch issue a leaf reports."""
    return Err((Issue(path, message or f"Expected {expected}", expected, received),))


def unwrap_result(result: ParseResult) -> Any:
    if isinstance(result, Err):
        raise ValidationError(result.issues)
    return result.value
