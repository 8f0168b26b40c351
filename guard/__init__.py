"""
Guard - Composable schema validation, coercion and transformation.

Usage:
    from guard import Object, String, Int, Literal, DiscriminatedUnion

    User = Object({
        "name": String().min(1),
        "email": String().email().optional(),
        "age": Int().nonnegative(),
    })

    user = User.parse(data)            # raises ValidationError
    result = User.safe_parse(data)     # Ok(value) | Err(issues)
    settings = Settings.coerce(env)    # "8080" -> 8080
"""

from .context import is_coercing, validation_context
from .core import Check, Schema
from .errors import GuardError, SchemaError, ValidationError
from .schema import parse, safe_parse, to_pydantic, validate
from .structures import UnknownKeys
from .types import MISSING, Err, Issue, Ok, ParseResult, Path
from .validators import (
    Any,
    Array,
    Boolean,
    Date,
    DiscriminatedUnion,
    Enum,
    InstanceOf,
    Int,
    Intersection,
    Lazy,
    Literal,
    Model,
    NativeEnum,
    Never,
    Null,
    Nullable,
    Number,
    Object,
    Optional,
    Predicate,
    Record,
    String,
    Tuple,
    Undefined,
    Union,
    Unknown,
    to_schema,
)

__all__ = [
    # Result types
    "Ok",
    "Err",
    "Issue",
    "ParseResult",
    "Path",
    "MISSING",
    # Errors
    "GuardError",
    "ValidationError",
    "SchemaError",
    # Core
    "Schema",
    "Check",
    "UnknownKeys",
    "to_schema",
    # Leaves
    "String",
    "Number",
    "Int",
    "Boolean",
    "Date",
    "Literal",
    "Enum",
    "NativeEnum",
    "Any",
    "Unknown",
    "Never",
    "Null",
    "Undefined",
    "InstanceOf",
    "Model",
    # Structures
    "Object",
    "Array",
    "Tuple",
    "Record",
    # Combinators
    "Optional",
    "Nullable",
    "Union",
    "Intersection",
    "DiscriminatedUnion",
    "Lazy",
    "Predicate",
    # Schema operations
    "parse",
    "safe_parse",
    "validate",
    "to_pydantic",
    # Configuration
    "validation_context",
    "is_coercing",
]
