"""
Tests for discriminated unions.
"""

import pytest
from structstest import Shape

from guard import (
    DiscriminatedUnion,
    Err,
    Literal,
    Number,
    Object,
    Ok,
    SchemaError,
    String,
)


class TestConstruction:
    def test_options_in_variant_order(self):
        assert Shape.options == ("circle", "rect", "point")

    def test_variant_must_be_object(self):
        with pytest.raises(SchemaError, match="must be an object schema"):
            DiscriminatedUnion("type", [Object({"type": Literal("a")}), String()])

    def test_variant_missing_key(self):
        with pytest.raises(SchemaError, match='missing discriminator key "type"'):
            DiscriminatedUnion(
                "type",
                [Object({"type": Literal("a")}), Object({"kind": Literal("b")})],
            )

    def test_discriminator_must_be_literal(self):
        with pytest.raises(SchemaError, match="must use Literal"):
            DiscriminatedUnion("type", [Object({"type": String()})])

    def test_duplicate_values(self):
        with pytest.raises(SchemaError, match="Duplicate discriminator value"):
            DiscriminatedUnion(
                "type",
                [
                    Object({"type": Literal("a"), "x": Number()}),
                    Object({"type": Literal("a"), "y": Number()}),
                ],
            )

    def test_schema_error_is_type_error(self):
        with pytest.raises(TypeError):
            DiscriminatedUnion("type", [Object({"type": String()})])

    def test_number_and_bool_tags_are_distinct(self):
        schema = DiscriminatedUnion(
            "v",
            [
                Object({"v": Literal(1), "n": Number()}),
                Object({"v": Literal(True), "s": String()}),
            ],
        )
        assert schema.parse({"v": 1, "n": 2}) == {"v": 1, "n": 2}
        assert schema.parse({"v": True, "s": "x"}) == {"v": True, "s": "x"}
        assert not schema.is_valid({"v": True, "n": 2})


class TestParsing:
    def test_selects_variant(self):
        assert Shape.parse({"type": "circle", "radius": 1}) == {"type": "circle", "radius": 1}
        assert Shape.parse({"type": "rect", "width": 2, "height": 3}) == {
            "type": "rect",
            "width": 2,
            "height": 3,
        }

    def test_variant_strips_unknown_keys(self):
        assert Shape.parse({"type": "point", "radius": 1}) == {"type": "point"}

    def test_unknown_tag(self):
        result = Shape.safe_parse({"type": "triangle"})
        assert isinstance(result, Err)
        assert len(result.issues) == 1
        issue = result.issues[0]
        assert issue.path == ("type",)
        assert "Invalid discriminator value" in issue.message
        assert issue.received == '"triangle"'
        assert issue.expected == '"circle" | "rect" | "point"'

    def test_missing_tag(self):
        result = Shape.safe_parse({"radius": 1})
        assert isinstance(result, Err)
        assert result.issues[0].path == ("type",)
        assert result.issues[0].message == 'Missing discriminator key "type"'

    def test_unhashable_tag(self):
        result = Shape.safe_parse({"type": ["circle"]})
        assert isinstance(result, Err)
        assert "Invalid discriminator value" in result.issues[0].message

    def test_non_object(self):
        result = Shape.safe_parse("circle")
        assert isinstance(result, Err)
        assert result.issues[0].message == "Expected object"

    def test_variant_issues_reported(self):
        result = Shape.safe_parse({"type": "rect", "width": "wide"})
        assert isinstance(result, Err)
        assert [issue.path for issue in result.issues] == [("width",), ("height",)]

    def test_nested_path(self):
        schema = Object({"shapes": Shape})
        result = schema.safe_parse({"shapes": {"type": "hexagon"}})
        assert isinstance(result, Err)
        assert result.issues[0].path == ("shapes", "type")

    def test_coercion_reaches_variant(self):
        assert Shape.coerce({"type": "circle", "radius": "2.5"}) == {
            "type": "circle",
            "radius": 2.5,
        }
        assert isinstance(Shape.safe_parse({"type": "circle", "radius": "2.5"}), Err)

    def test_ok_result(self):
        assert isinstance(Shape.safe_parse({"type": "point"}), Ok)
