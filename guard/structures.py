"""
Structural validators for guard.

Objects, arrays, tuples and records recurse into their children with an
extended path and collect every child issue instead of stopping at the first.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Any

from .combinators import OptionalSchema
from .core import Check, Checked, Schema, run_checks, type_error
from .lib.formatting import kind_of
from .primitives import EnumSchema
from .types import MISSING, Err, Issue, Ok, ParseResult, Path


class UnknownKeys(Enum):
    """Policies for object keys that are not declared in the shape."""

    STRIP = "strip"  # Drop them from the output
    STRICT = "strict"  # Report one issue per key
    PASSTHROUGH = "passthrough"  # Copy them to the output unvalidated


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


@dataclass(frozen=True, slots=True)
class ObjectSchema(Schema):
    """
    Validator for mappings with a declared shape.

    Declared keys are validated against their field schema (absent keys are
    seen as MISSING). Unknown keys go to ``catchall_schema`` when one is set,
    otherwise ``unknown_keys`` decides what happens to them.
    """

    shape: Mapping[str, Schema]
    unknown_keys: UnknownKeys = UnknownKeys.STRIP
    catchall_schema: Schema | None = None

    def __post_init__(self) -> None:
        for key, field in self.shape.items():
            if not isinstance(field, Schema):
                raise TypeError(
                    f"Field {key!r} must be a schema, got {type(field).__name__}"
                )
        object.__setattr__(self, "shape", MappingProxyType(dict(self.shape)))

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if not isinstance(value, Mapping):
            return type_error(path, "object", kind_of(value))

        output: dict[Any, Any] = {}
        issues: list[Issue] = []

        for key, field in self.shape.items():
            result = field(value.get(key, MISSING), (*path, key), coerce)
            if isinstance(result, Err):
                issues.extend(result.issues)
            elif result.value is not MISSING:
                output[key] = result.value

        for key, item in value.items():
            if key in self.shape:
                continue
            if self.catchall_schema is not None:
                result = self.catchall_schema(item, (*path, key), coerce)
                if isinstance(result, Err):
                    issues.extend(result.issues)
                else:
                    output[key] = result.value
            elif self.unknown_keys is UnknownKeys.STRICT:
                issues.append(Issue((*path, key), f'Unrecognized key "{key}"'))
            elif self.unknown_keys is UnknownKeys.PASSTHROUGH:
                output[key] = item

        return Err(tuple(issues)) if issues else Ok(output)

    # Unknown-key policies

    def strict(self) -> ObjectSchema:
        """Reject objects with unknown keys."""
        return replace(self, unknown_keys=UnknownKeys.STRICT, catchall_schema=None)

    def strip(self) -> ObjectSchema:
        """Silently drop unknown keys (the default)."""
        return replace(self, unknown_keys=UnknownKeys.STRIP, catchall_schema=None)

    def passthrough(self) -> ObjectSchema:
        """Copy unknown keys to the output unmodified."""
        return replace(self, unknown_keys=UnknownKeys.PASSTHROUGH, catchall_schema=None)

    def catchall(self, schema: Schema) -> ObjectSchema:
        """Validate every unknown key's value with ``schema``."""
        if not isinstance(schema, Schema):
            raise TypeError(
                f"catchall() requires a schema, got {type(schema).__name__}"
            )
        return replace(self, catchall_schema=schema)

    # Shape algebra

    def extend(self, shape: Mapping[str, Schema]) -> ObjectSchema:
        """Add fields; on collision the new field wins."""
        return replace(self, shape={**self.shape, **shape})

    def merge(self, other: ObjectSchema) -> ObjectSchema:
        """Extend with another object schema's fields."""
        if not isinstance(other, ObjectSchema):
            raise TypeError(f"Cannot merge with {type(other).__name__}")
        return self.extend(other.shape)

    def pick(self, *keys: str) -> ObjectSchema:
        return replace(self, shape={k: self.shape[k] for k in keys if k in self.shape})

    def omit(self, *keys: str) -> ObjectSchema:
        return replace(
            self, shape={k: v for k, v in self.shape.items() if k not in keys}
        )

    def partial(self, *keys: str) -> ObjectSchema:
        """Make every field (or only the named ones) optional."""
        targets = keys or tuple(self.shape)
        shape = {
            k: v.optional()
            if k in targets and not isinstance(v, OptionalSchema)
            else v
            for k, v in self.shape.items()
        }
        return replace(self, shape=shape)

    def required(self, *keys: str) -> ObjectSchema:
        """Undo partial(): strip the optional wrapper from fields."""
        targets = keys or tuple(self.shape)
        shape = {}
        for k, v in self.shape.items():
            if k in targets:
                while isinstance(v, OptionalSchema):
                    v = v.inner
            shape[k] = v
        return replace(self, shape=shape)

    def keyof(self) -> EnumSchema:
        """Enum schema over this shape's keys."""
        return EnumSchema(tuple(self.shape))


@dataclass(frozen=True, slots=True)
class ArraySchema(Checked, Schema):
    """Validator for lists with per-element validation."""

    element: Schema
    checks: tuple[Check, ...] = ()

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if not _is_sequence(value):
            return type_error(path, "array", kind_of(value))

        output: list[Any] = []
        issues: list[Issue] = []

        for i, item in enumerate(value):
            result = self.element(item, (*path, i), coerce)
            if isinstance(result, Err):
                issues.extend(result.issues)
            else:
                output.append(result.value)

        if issues:
            return Err(tuple(issues))

        return run_checks(self.checks, output, path)

    def min(self, n: int) -> ArraySchema:
        return self._add(
            lambda v: len(v) >= n, f"Array must have at least {n} items", f"min({n})"
        )

    def max(self, n: int) -> ArraySchema:
        return self._add(
            lambda v: len(v) <= n, f"Array must have at most {n} items", f"max({n})"
        )

    def length(self, n: int) -> ArraySchema:
        return self._add(
            lambda v: len(v) == n, f"Array must have exactly {n} items", f"length({n})"
        )

    def nonempty(self) -> ArraySchema:
        return self.min(1)


@dataclass(frozen=True, slots=True)
class TupleSchema(Schema):
    """Validator for fixed-length sequences, one schema per position."""

    items: tuple[Schema, ...]
    rest_schema: Schema | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", tuple(self.items))

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if not _is_sequence(value):
            return type_error(path, "tuple", kind_of(value))

        n, size = len(self.items), len(value)
        if self.rest_schema is None and size != n:
            return Err((Issue(path, f"Expected tuple of length {n}, got {size}"),))
        if size < n:
            return Err(
                (Issue(path, f"Expected tuple of at least {n} items, got {size}"),)
            )

        output: list[Any] = []
        issues: list[Issue] = []

        for i, item in enumerate(value):
            schema = self.items[i] if i < n else self.rest_schema
            result = schema(item, (*path, i), coerce)
            if isinstance(result, Err):
                issues.extend(result.issues)
            else:
                output.append(result.value)

        return Err(tuple(issues)) if issues else Ok(tuple(output))

    def rest(self, schema: Schema) -> TupleSchema:
        """Validate elements past the fixed positions with ``schema``."""
        return replace(self, rest_schema=schema)


@dataclass(frozen=True, slots=True)
class RecordSchema(Schema):
    """Validator for mappings with arbitrary keys and uniform values."""

    key_schema: Schema
    value_schema: Schema

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if not isinstance(value, Mapping):
            return type_error(path, "record", kind_of(value))

        output: dict[Any, Any] = {}
        issues: list[Issue] = []

        for k, v in value.items():
            entry_path = (*path, k)
            key_result = self.key_schema(k, entry_path, coerce)
            if isinstance(key_result, Err):
                issues.extend(key_result.issues)
                continue
            value_result = self.value_schema(v, entry_path, coerce)
            if isinstance(value_result, Err):
                issues.extend(value_result.issues)
            else:
                output[key_result.value] = value_result.value

        return Err(tuple(issues)) if issues else Ok(output)
