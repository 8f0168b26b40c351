"""
Builder functions for guard schemas.

Provides factory functions that return schema nodes.
"""

from __future__ import annotations

import enum
import typing
from collections.abc import Mapping
from datetime import datetime

from pydantic import BaseModel

from .combinators import (
    DiscriminatedUnionSchema,
    IntersectionSchema,
    LazySchema,
    NullableSchema,
    OptionalSchema,
    UnionSchema,
)
from .core import Schema
from .primitives import (
    AnySchema,
    BooleanSchema,
    DateSchema,
    EnumSchema,
    InstanceOfSchema,
    LiteralSchema,
    ModelSchema,
    NativeEnumSchema,
    NeverSchema,
    NullSchema,
    NumberSchema,
    StringSchema,
    UndefinedSchema,
    UnknownSchema,
)
from .structures import ArraySchema, ObjectSchema, RecordSchema, TupleSchema
from .types import MISSING, CheckFn


def String() -> StringSchema:
    """
    Validate a str.

    Usage:
        String()
        String().min(1).max(50)
        String().email()
    """
    return StringSchema()


def Number() -> NumberSchema:
    """
    Validate an int or float (never bool, never NaN).

    Usage:
        Number().min(0).max(100)
        Number().int().positive()
    """
    return NumberSchema()


def Int() -> NumberSchema:
    """Shorthand for Number().int()."""
    return NumberSchema().int()


def Boolean() -> BooleanSchema:
    return BooleanSchema()


def Date() -> DateSchema:
    """Validate a datetime; coercion accepts ISO-8601 text and epoch seconds."""
    return DateSchema()


def Literal(value: typing.Any) -> LiteralSchema:
    """
    Validate exact equality with a constant.

    Usage:
        Literal("circle")
        Literal(200)
    """
    return LiteralSchema(value)


def Enum(*values: str | typing.Iterable[str]) -> EnumSchema:
    """
    Validate membership in a fixed set of strings.

    Usage:
        Enum("active", "inactive", "pending")
        Enum(["active", "inactive", "pending"])
    """
    if len(values) == 1 and not isinstance(values[0], str):
        return EnumSchema(tuple(values[0]))
    return EnumSchema(values)  # type: ignore[arg-type]


def NativeEnum(
    enum_type: type[enum.Enum] | Mapping[str, typing.Any],
) -> NativeEnumSchema:
    """
    Validate against the values of an enum.Enum subclass or a plain mapping.

    Usage:
        class Color(enum.Enum):
            RED = "red"

        NativeEnum(Color).parse("red")  # Color.RED
    """
    is_enum = isinstance(enum_type, type) and issubclass(enum_type, enum.Enum)
    if not is_enum and not isinstance(enum_type, Mapping):
        raise TypeError(
            "NativeEnum() requires an Enum subclass or a mapping, "
            f"got {type(enum_type).__name__}"
        )
    return NativeEnumSchema(enum_type)


def Any() -> AnySchema:
    return AnySchema()


def Unknown() -> UnknownSchema:
    return UnknownSchema()


def Never() -> NeverSchema:
    return NeverSchema()


def Null() -> NullSchema:
    return NullSchema()


def Undefined() -> UndefinedSchema:
    return UndefinedSchema()


def InstanceOf(cls: type) -> InstanceOfSchema:
    """Validate that value is an instance of ``cls``."""
    if not isinstance(cls, type):
        raise TypeError(f"InstanceOf() requires a class, got {type(cls).__name__}")
    return InstanceOfSchema(cls)


def Model(model: type[BaseModel]) -> ModelSchema:
    """Validate through a Pydantic model, returning a model instance."""
    if not (isinstance(model, type) and issubclass(model, BaseModel)):
        raise TypeError(f"Model() requires a Pydantic model class, got {model!r}")
    return ModelSchema(model)


def Object(shape: Mapping[str, typing.Any]) -> ObjectSchema:
    """
    Validate a mapping against a field shape.

    Field values are converted with to_schema(), so nested dicts and plain
    types work too.

    Usage:
        Object({
            "name": String(),
            "email": String().email().optional(),
            "tags": [str],
        })
    """
    if not isinstance(shape, Mapping):
        raise TypeError(f"Object() requires a mapping, got {type(shape).__name__}")
    return ObjectSchema({key: to_schema(value) for key, value in shape.items()})


def Array(element: typing.Any) -> ArraySchema:
    return ArraySchema(to_schema(element))


def Tuple(*items: typing.Any) -> TupleSchema:
    """
    Validate a fixed-length sequence position by position.

    Usage:
        Tuple(String(), Number())
        Tuple(String()).rest(Number())
    """
    return TupleSchema(tuple(to_schema(item) for item in items))


def Record(key_or_value: typing.Any, value: typing.Any = MISSING) -> RecordSchema:
    """
    Validate a mapping with uniform keys and values.

    Usage:
        Record(Number())              # str keys, number values
        Record(Enum("a", "b"), Int())
    """
    if value is MISSING:
        return RecordSchema(StringSchema(), to_schema(key_or_value))
    return RecordSchema(to_schema(key_or_value), to_schema(value))


def Optional(v: typing.Any) -> OptionalSchema:
    """Allow MISSING, validate if present."""
    return OptionalSchema(to_schema(v))


def Nullable(v: typing.Any) -> NullableSchema:
    """Allow None, validate otherwise."""
    return NullableSchema(to_schema(v))


def Union(*options: typing.Any) -> UnionSchema:
    """
    Accept the first option that matches.

    Usage:
        Union(String(), Number())
        String() | Number()      # Same as above
    """
    return UnionSchema(tuple(to_schema(option) for option in options))


def Intersection(left: typing.Any, right: typing.Any) -> IntersectionSchema:
    return IntersectionSchema(to_schema(left), to_schema(right))


def DiscriminatedUnion(
    discriminator: str, variants: typing.Iterable[ObjectSchema]
) -> DiscriminatedUnionSchema:
    """
    Select an object variant by the literal value of one key.

    Raises SchemaError immediately if a variant lacks the key, uses a
    non-literal schema for it, or repeats another variant's value.

    Usage:
        Shape = DiscriminatedUnion("type", [
            Object({"type": Literal("circle"), "radius": Number()}),
            Object({"type": Literal("rect"), "width": Number(), "height": Number()}),
        ])
    """
    options = tuple(to_schema(v) for v in variants)
    return DiscriminatedUnionSchema(discriminator, options)


def Lazy(getter: typing.Callable[[], Schema]) -> LazySchema:
    """Resolve the schema on every evaluation (for recursive schemas)."""
    if not callable(getter):
        raise TypeError("Lazy() requires a callable")
    return LazySchema(getter)


def Predicate(fn: CheckFn, message: str | None = None) -> Schema:
    """
    Create a schema from an arbitrary predicate function.

    Usage:
        Predicate(lambda x: x > 0, "Must be positive")
        Predicate(str.isalpha, "Must be alphabetic")
    """
    return AnySchema().refine(fn, message)


_BUILTIN_TYPES: dict[type, typing.Callable[[], Schema]] = {
    str: StringSchema,
    float: NumberSchema,
    bool: BooleanSchema,
    datetime: DateSchema,
    type(None): NullSchema,
}


def to_schema(v: typing.Any) -> Schema:
    """
    Coerce a value to a schema.

    Conversion rules:
        Schema -> pass through
        None -> Null()
        str / float / bool / datetime -> matching leaf schema
        int -> Int()
        Enum subclass -> NativeEnum()
        Pydantic model -> Model()
        other type -> InstanceOf()
        dict -> Object() with recursive conversion
        list -> Array() of list[0], or of a Union for several items
        tuple -> Tuple()
        Callable -> Predicate()
    """
    if isinstance(v, Schema):
        return v

    if v is None:
        return NullSchema()

    if isinstance(v, type):
        if v in _BUILTIN_TYPES:
            return _BUILTIN_TYPES[v]()
        if v is int:
            return Int()
        if issubclass(v, enum.Enum):
            return NativeEnumSchema(v)
        if issubclass(v, BaseModel):
            return ModelSchema(v)
        return InstanceOfSchema(v)

    if isinstance(v, dict):
        return Object(v)

    if isinstance(v, list):
        if len(v) == 0:
            raise ValueError("Empty list cannot be converted to schema")
        if len(v) == 1:
            return Array(v[0])
        # Multiple items = OR logic for item types
        return Array(Union(*v))

    if isinstance(v, tuple):
        return Tuple(*v)

    if callable(v):
        return Predicate(v)

    raise TypeError(f"Cannot convert {type(v).__name__} to schema")
