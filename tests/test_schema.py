"""
Tests for guard results, errors, schema operations and Pydantic interop.
"""

import threading
from datetime import datetime
from decimal import Decimal

import pytest
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from structstest import Account, Color, Patient, Point, User

from guard import (
    Array,
    Err,
    GuardError,
    Int,
    Issue,
    Model,
    Number,
    Object,
    Ok,
    String,
    ValidationError,
    is_coercing,
    parse,
    safe_parse,
    to_pydantic,
    to_schema,
    validate,
    validation_context,
)
from guard.primitives import (
    DateSchema,
    InstanceOfSchema,
    ModelSchema,
    NativeEnumSchema,
    NullSchema,
)
from guard.structures import ArraySchema, ObjectSchema, TupleSchema


class TestResults:
    def test_ok(self):
        result = Ok(5)
        assert result.ok
        assert result.is_ok()
        assert not result.is_err()
        assert result.value == 5

    def test_err(self):
        issue = Issue(("a",), "bad")
        result = Err([issue])
        assert not result.ok
        assert result.is_err()
        assert result.issues == (issue,)
        assert result.error == (issue,)

    def test_err_requires_issues(self):
        with pytest.raises(ValueError):
            Err(())

    def test_issue_str(self):
        assert str(Issue(("users", 0, "name"), "Expected string")) == (
            "users.0.name: Expected string"
        )
        assert str(Issue((), "Expected string")) == "Expected string"


class TestValidationError:
    def test_raised_by_parse(self):
        with pytest.raises(ValidationError) as exc_info:
            Point.parse({})
        assert str(exc_info.value) == "a: Expected number; b: Expected number"
        assert len(exc_info.value.issues) == 2

    def test_is_value_error(self):
        with pytest.raises(ValueError):
            String().parse(1)
        with pytest.raises(GuardError):
            String().parse(1)

    def test_nested_message(self):
        with pytest.raises(ValidationError, match=r"addresses\.1\.street: Expected string"):
            Account.parse(
                {
                    "user": {"name": "Ada", "age": 1, "role": "admin"},
                    "addresses": [{"street": "a", "city": "b"}, {"street": 1, "city": "c"}],
                    "active": True,
                }
            )

    def test_flatten(self):
        with pytest.raises(ValidationError) as exc_info:
            User.parse({"name": "", "age": -1, "role": "admin"})
        assert exc_info.value.flatten() == {
            "name": ["String must be at least 1 characters"],
            "age": ["Expected non-negative number"],
        }

    def test_flatten_root(self):
        with pytest.raises(ValidationError) as exc_info:
            String().parse(1)
        assert exc_info.value.flatten() == {"": ["Expected string"]}

    def test_requires_issues(self):
        with pytest.raises(ValueError):
            ValidationError([])


class TestModuleFunctions:
    def test_parse_with_dict_schema(self):
        assert parse({"n": int}, {"n": 1}) == {"n": 1}

    def test_safe_parse(self):
        assert isinstance(safe_parse(Number(), 5), Ok)
        assert isinstance(safe_parse(Number(), "5"), Err)

    def test_explicit_coerce(self):
        assert parse(Number(), "5", coerce=True) == 5

    def test_validate(self):
        result = validate({"name": "Ada"}, {"name": String(), "age": Int().optional()})
        assert isinstance(result, Ok)
        assert result.value == {"name": "Ada"}

    def test_validate_requires_object_schema(self):
        with pytest.raises(TypeError):
            validate({"a": 1}, String())


class TestValidationContext:
    def test_default_off(self):
        assert not is_coercing()

    def test_enables_coercion_for_module_functions(self):
        with validation_context(coerce=True):
            assert is_coercing()
            assert parse(Object({"port": Int()}), {"port": "8080"}) == {"port": 8080}
        assert not is_coercing()
        assert isinstance(safe_parse(Int(), "8080"), Err)

    def test_schema_methods_unaffected(self):
        with validation_context(coerce=True):
            assert not Number().is_valid("5")

    def test_explicit_flag_wins(self):
        with validation_context(coerce=True):
            assert isinstance(safe_parse(Number(), "5", coerce=False), Err)

    def test_nesting_restores(self):
        with validation_context(coerce=True):
            with validation_context(coerce=False):
                assert not is_coercing()
            assert is_coercing()

    def test_reset_after_exception(self):
        with pytest.raises(RuntimeError):
            with validation_context(coerce=True):
                raise RuntimeError("boom")
        assert not is_coercing()

    def test_other_threads_keep_default(self):
        seen = []
        with validation_context(coerce=True):
            worker = threading.Thread(target=lambda: seen.append(is_coercing()))
            worker.start()
            worker.join()
        assert seen == [False]


class TestToSchema:
    def test_builtin_types(self):
        assert to_schema(str).is_valid("x")
        assert to_schema(float).is_valid(1.5)
        assert to_schema(bool).is_valid(True)
        assert isinstance(to_schema(datetime), DateSchema)

    def test_int_type_is_integer_number(self):
        assert to_schema(int).is_valid(3)
        assert not to_schema(int).is_valid(3.5)

    def test_none(self):
        assert isinstance(to_schema(None), NullSchema)

    def test_enum_and_model_classes(self):
        assert isinstance(to_schema(Color), NativeEnumSchema)
        assert isinstance(to_schema(Patient), ModelSchema)

    def test_other_classes(self):
        schema = to_schema(Decimal)
        assert isinstance(schema, InstanceOfSchema)
        assert schema.is_valid(Decimal("1.5"))

    def test_containers(self):
        assert isinstance(to_schema({"a": str}), ObjectSchema)
        assert isinstance(to_schema([str]), ArraySchema)
        assert isinstance(to_schema((str, int)), TupleSchema)

    def test_multi_item_list_is_union(self):
        schema = to_schema([str, int])
        assert schema.parse(["a", 1]) == ["a", 1]
        assert not schema.is_valid([1.5])

    def test_empty_list(self):
        with pytest.raises(ValueError):
            to_schema([])

    def test_callable(self):
        schema = to_schema(lambda v: v == "ok")
        assert schema.is_valid("ok")
        assert not schema.is_valid("no")

    def test_unsupported(self):
        with pytest.raises(TypeError):
            to_schema(42)


class TestModel:
    def test_returns_instance(self):
        patient = Model(Patient).parse({"id": "p1", "name": "Ada", "active": True})
        assert isinstance(patient, Patient)
        assert patient.age is None

    def test_instance_passes_unchanged(self):
        patient = Patient(id="p1", name="Ada", active=True)
        assert Model(Patient).parse(patient) is patient

    def test_error_locations_extend_path(self):
        schema = Object({"patient": Model(Patient)})
        result = schema.safe_parse({"patient": {"id": "p1", "name": "Ada"}})
        assert isinstance(result, Err)
        assert result.issues[0].path == ("patient", "active")

    def test_strict_without_coercion(self):
        data = {"id": "p1", "name": "Ada", "active": "true", "age": "3"}
        assert isinstance(Model(Patient).safe_parse(data), Err)
        patient = Model(Patient).coerce(data)
        assert patient.active is True
        assert patient.age == 3

    def test_missing_value(self):
        result = Object({"patient": Model(Patient)}).safe_parse({})
        assert isinstance(result, Err)
        assert result.issues[0].path == ("patient",)

    def test_requires_model_class(self):
        with pytest.raises(TypeError):
            Model(dict)


class TestToPydantic:
    def test_generates_model(self):
        UserModel = to_pydantic("UserModel", User)
        assert issubclass(UserModel, BaseModel)
        assert UserModel.__name__ == "UserModel"
        assert set(UserModel.model_fields) == {"name", "email", "age", "role"}

    def test_validates_with_schema(self):
        UserModel = to_pydantic("UserModel", User)
        user = UserModel(name="Ada", age=36, role="admin")
        assert user.name == "Ada"
        assert user.email is None

        with pytest.raises(PydanticValidationError):
            UserModel(name="", age=36, role="admin")
        with pytest.raises(PydanticValidationError):
            UserModel(name="Ada", age=36, role="owner")

    def test_required_fields(self):
        PointModel = to_pydantic("PointModel", Point)
        with pytest.raises(PydanticValidationError):
            PointModel(a=1)

    def test_defaults(self):
        Settings = to_pydantic(
            "Settings",
            {"port": Int().default(8080), "tags": Array(String()).default(factory=list)},
        )
        first = Settings()
        second = Settings()
        assert first.port == 8080
        assert first.tags == []
        assert first.tags is not second.tags

    def test_requires_object_schema(self):
        with pytest.raises(TypeError):
            to_pydantic("Bad", String())
