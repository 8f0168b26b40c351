"""
Schema operations for guard.

Provides parse(), safe_parse(), validate() and to_pydantic() functions.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any
from typing import Literal as TypingLiteral
from typing import Optional as TypingOptional

from pydantic import ConfigDict, Field, PlainValidator, create_model

from .combinators import DefaultSchema, NullableSchema, OptionalSchema
from .context import is_coercing
from .core import Schema, unwrap_result
from .primitives import (
    BooleanSchema,
    DateSchema,
    EnumSchema,
    InstanceOfSchema,
    LiteralSchema,
    ModelSchema,
    NativeEnumSchema,
    NullSchema,
    NumberSchema,
    StringSchema,
)
from .structures import ArraySchema, ObjectSchema, RecordSchema, TupleSchema
from .types import ParseResult
from .validators import to_schema


def safe_parse(schema: Any, value: Any, coerce: bool | None = None) -> ParseResult:
    """
    Validate a value against a schema, returning a result.

    Args:
        schema: A schema, or anything to_schema() accepts (dict, type, ...)
        value: The raw value
        coerce: Enable coercion; None uses the validation_context() default

    Returns:
        Ok(value) if validation passes
        Err(issues) if validation fails
    """
    if coerce is None:
        coerce = is_coercing()
    return to_schema(schema)(value, (), coerce)


def parse(schema: Any, value: Any, coerce: bool | None = None) -> Any:
    """Validate a value against a schema, raising ValidationError on failure."""
    return unwrap_result(safe_parse(schema, value, coerce))


def validate(
    data: dict[str, Any], schema: Any, coerce: bool | None = None
) -> ParseResult:
    """
    Validate a dict against a dict-like or object schema.

    Usage:
        schema = {
            "name": String().min(1),
            "email": String().email().optional(),
            "age": Int() & Predicate(lambda n: n >= 0),
        }
        result = validate({"name": "Alice", "age": 30}, schema)
    """
    validator = to_schema(schema)
    if not isinstance(validator, ObjectSchema):
        raise TypeError("Schema must be a dict or an object schema")
    return safe_parse(validator, data, coerce)


def to_pydantic(name: str, schema: Any) -> type:
    """
    Compile an object schema to a Pydantic model.

    Each field keeps its guard schema as a plain validator, so the model
    accepts exactly what the schema accepts. Optional fields default to None
    and Default fields to their default.

    Args:
        name: Name of the generated model class
        schema: Object schema or dict-like schema definition

    Returns:
        A Pydantic BaseModel subclass

    Usage:
        User = to_pydantic("User", {
            "name": String(),
            "email": String().email().optional(),
        })
        user = User(name="Alice")
    """
    validator = to_schema(schema)
    if not isinstance(validator, ObjectSchema):
        raise TypeError("Schema must be a dict or an object schema")

    fields: dict[str, Any] = {}

    for key, field_schema in validator.shape.items():
        annotation = Annotated[
            _python_type(field_schema), PlainValidator(_field_validator(field_schema))
        ]
        fields[key] = (annotation, _pydantic_default(field_schema))

    return create_model(
        name, __config__=ConfigDict(arbitrary_types_allowed=True), **fields
    )


def _field_validator(schema: Schema):
    def run(value: Any) -> Any:
        return unwrap_result(schema(value, (), False))

    return run


def _pydantic_default(schema: Schema) -> Any:
    """Pydantic default for a field: required unless optional or defaulted."""
    match schema:
        case OptionalSchema():
            return None
        case DefaultSchema(factory=factory) if factory is not None:
            return Field(default_factory=factory)
        case DefaultSchema(default_value=value):
            return value
    return ...


def _python_type(schema: Schema) -> Any:
    """Closest Python annotation for a schema (used for model metadata)."""
    match schema:
        case StringSchema():
            return str
        case NumberSchema():
            return float
        case BooleanSchema():
            return bool
        case DateSchema():
            return datetime
        case LiteralSchema(value=value):
            return TypingLiteral[value]
        case EnumSchema(values=values) if values:
            return TypingLiteral[values]
        case NativeEnumSchema(enum_type=enum_type) if isinstance(enum_type, type):
            return enum_type
        case NullSchema():
            return type(None)
        case OptionalSchema(inner=inner) | NullableSchema(inner=inner):
            return TypingOptional[_python_type(inner)]
        case DefaultSchema(inner=inner):
            return _python_type(inner)
        case ArraySchema(element=element):
            return list[_python_type(element)]  # type: ignore[misc]
        case TupleSchema(items=items, rest_schema=None) if items:
            item_types = tuple(_python_type(item) for item in items)
            return tuple[item_types]  # type: ignore[misc]
        case RecordSchema(value_schema=value_schema):
            return dict[str, _python_type(value_schema)]  # type: ignore[misc]
        case ObjectSchema():
            return dict[str, Any]
        case InstanceOfSchema(cls=cls):
            return cls
        case ModelSchema(model=model):
            return model

    return Any
