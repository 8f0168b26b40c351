"""
Shared test schemas for all test files.

Consolidates the schemas and Pydantic models used across the test suite so
that each test file works against the same data structures.
"""

from enum import Enum as PyEnum
from enum import IntEnum
from typing import Optional

from pydantic import BaseModel

from guard import (
    Array,
    Boolean,
    DiscriminatedUnion,
    Enum,
    Int,
    Lazy,
    Literal,
    Number,
    Object,
    String,
)

# =============================================================================
# Enumerations
# =============================================================================


class Color(PyEnum):
    RED = "red"
    GREEN = "green"


class Status(IntEnum):
    ACTIVE = 1
    INACTIVE = 0


# =============================================================================
# Object Schemas
# =============================================================================

Point = Object({"a": Number(), "b": Number()})

User = Object(
    {
        "name": String().min(1),
        "email": String().email().optional(),
        "age": Int().nonnegative(),
        "role": Enum("admin", "member"),
    }
)

Address = Object({"street": String(), "city": String()})

Account = Object(
    {
        "user": User,
        "addresses": Array(Address),
        "active": Boolean(),
    }
)

# =============================================================================
# Discriminated Unions
# =============================================================================

Shape = DiscriminatedUnion(
    "type",
    [
        Object({"type": Literal("circle"), "radius": Number()}),
        Object({"type": Literal("rect"), "width": Number(), "height": Number()}),
        Object({"type": Literal("point")}),
    ],
)

# =============================================================================
# Recursive Schemas
# =============================================================================

Tree = Lazy(lambda: Object({"value": String(), "children": Array(Tree)}))

# =============================================================================
# Pydantic Models
# =============================================================================


class Patient(BaseModel):
    """Sample Patient model for interop tests."""

    id: str
    name: str
    active: bool
    age: Optional[int] = None
