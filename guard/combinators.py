"""
Combinator schemas for guard.

Combinators wrap one or more child schemas and change how failure and
acceptance work, or post-process the validated value.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

from .core import Schema, type_error
from .errors import SchemaError
from .lib.formatting import kind_of, render
from .primitives import LiteralSchema, literal_key
from .types import MISSING, CheckFn, Err, Issue, Ok, ParseResult, Path, format_path

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OptionalSchema(Schema):
    inner: Schema

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if value is MISSING:
            return Ok(MISSING)
        return self.inner(value, path, coerce)

    def unwrap(self) -> Schema:
        return self.inner


@dataclass(frozen=True, slots=True)
class NullableSchema(Schema):
    inner: Schema

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if value is None:
            return Ok(None)
        return self.inner(value, path, coerce)

    def unwrap(self) -> Schema:
        return self.inner


@dataclass(frozen=True, slots=True)
class DefaultSchema(Schema):
    """
    Substitute a default for MISSING.

    The default is returned as-is; it is not validated against ``inner``.
    """

    inner: Schema
    default_value: Any = MISSING
    factory: Callable[[], Any] | None = None

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if value is MISSING:
            if self.factory is not None:
                return Ok(self.factory())
            return Ok(self.default_value)
        return self.inner(value, path, coerce)

    def remove_default(self) -> Schema:
        return self.inner


@dataclass(frozen=True, slots=True)
class TransformSchema(Schema):
    inner: Schema
    fn: Callable[[Any], Any]

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        result = self.inner(value, path, coerce)
        if isinstance(result, Err):
            return result
        try:
            return Ok(self.fn(result.value))
        except Exception as e:
            logger.debug("Transform raised at %r", format_path(path), exc_info=True)
            return Err((Issue(path, f"Transform failed: {e}"),))


@dataclass(frozen=True, slots=True)
class RefineSchema(Schema):
    inner: Schema
    check: CheckFn
    message: str = "Refinement check failed"

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        result = self.inner(value, path, coerce)
        if isinstance(result, Err):
            return result
        try:
            passed = self.check(result.value)
        except Exception as e:
            logger.debug("Refinement raised at %r", format_path(path), exc_info=True)
            return Err((Issue(path, f"Validation error: {e}"),))
        if not passed:
            return Err((Issue(path, self.message),))
        return result


@dataclass(frozen=True, slots=True)
class PipeSchema(Schema):
    first: Schema
    second: Schema

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        result = self.first(value, path, coerce)
        if isinstance(result, Err):
            return result
        return self.second(result.value, path, coerce)


@dataclass(frozen=True, slots=True)
class UnionSchema(Schema):
    """
    First matching option wins.

    When no option matches, the member issues are dropped in favour of one
    "did not match" issue at the current path.
    """

    options: tuple[Schema, ...]

    def __post_init__(self) -> None:
        options = tuple(self.options)
        if not options:
            raise SchemaError("Union requires at least one option")
        object.__setattr__(self, "options", options)

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        for option in self.options:
            result = option(value, path, coerce)
            if isinstance(result, Ok):
                return result
        return Err(
            (
                Issue(
                    path,
                    "Value did not match any variant in union",
                    received=kind_of(value),
                ),
            )
        )


@dataclass(frozen=True, slots=True)
class IntersectionSchema(Schema):
    left: Schema
    right: Schema

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        left = self.left(value, path, coerce)
        if isinstance(left, Err):
            return left
        right = self.right(value, path, coerce)
        if isinstance(right, Err):
            return right

        if isinstance(left.value, Mapping) and isinstance(right.value, Mapping):
            return Ok({**left.value, **right.value})
        return left


@dataclass(frozen=True, slots=True)
class DiscriminatedUnionSchema(Schema):
    """
    Tagged union of object schemas selected by a literal-valued key.

    Every variant must be an object schema whose ``discriminator`` field is a
    Literal, and no two variants may share a literal value; SchemaError is
    raised at construction otherwise. Parsing looks the tag up and hands the
    whole input to the matching variant.
    """

    discriminator: str
    variants: tuple[Schema, ...]
    lookup: Mapping[tuple[str, Any], Schema] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        # Import here to avoid circular dependency
        from .structures import ObjectSchema

        key = self.discriminator
        variants = tuple(self.variants)
        lookup: dict[tuple[str, Any], Schema] = {}

        for index, variant in enumerate(variants):
            if not isinstance(variant, ObjectSchema):
                raise SchemaError(
                    f"Discriminated union variant {index} must be an object schema, "
                    f"got {type(variant).__name__}"
                )
            tag = variant.shape.get(key)
            if tag is None:
                raise SchemaError(
                    f"Discriminated union variant {index} is missing "
                    f'discriminator key "{key}"'
                )
            if not isinstance(tag, LiteralSchema):
                raise SchemaError(
                    f'Discriminator "{key}" in variant {index} must use Literal(), '
                    f"got {type(tag).__name__}"
                )
            tag_key = literal_key(tag.value)
            if tag_key in lookup:
                raise SchemaError(
                    f'Duplicate discriminator value {render(tag.value)} for key "{key}"'
                )
            lookup[tag_key] = variant

        logger.debug(
            "Built discriminated union on %r with %d variants", key, len(lookup)
        )
        object.__setattr__(self, "variants", variants)
        object.__setattr__(self, "lookup", lookup)

    @property
    def options(self) -> tuple[Any, ...]:
        """Discriminator values, in variant order."""
        key = self.discriminator
        return tuple(variant.shape[key].value for variant in self.variants)

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        if not isinstance(value, Mapping):
            return type_error(path, "object", kind_of(value))

        key = self.discriminator
        expected = " | ".join(render(option) for option in self.options)
        if key not in value:
            return Err(
                (
                    Issue(
                        (*path, key),
                        f'Missing discriminator key "{key}"',
                        expected=expected,
                    ),
                )
            )

        tag = value[key]
        try:
            variant = self.lookup.get(literal_key(tag))
        except TypeError:
            # unhashable tag
            variant = None
        if variant is None:
            return Err(
                (
                    Issue(
                        (*path, key),
                        f"Invalid discriminator value. Expected {expected}",
                        expected=expected,
                        received=render(tag),
                    ),
                )
            )
        return variant(value, path, coerce)


@dataclass(frozen=True, slots=True)
class LazySchema(Schema):
    """
    Defer building the wrapped schema until evaluation.

    ``getter`` runs on every evaluation, which is what lets a schema refer to
    itself:

        Tree = Lazy(lambda: Object({"value": String(), "children": Array(Tree)}))
    """

    getter: Callable[[], Schema]

    def __call__(
        self, value: Any, path: Path = (), coerce: bool = False
    ) -> ParseResult:
        schema = self.getter()
        if not isinstance(schema, Schema):
            raise TypeError(
                f"Lazy getter returned {type(schema).__name__}, not a schema"
            )
        return schema(value, path, coerce)
