"""Tests for schema inference from example documents."""

from __future__ import annotations

import json

import pytest

from jsonscope.models.schema import InvalidSchemaError
from jsonscope.schema.inference import DRAFT_07, infer_schema, schema_from_document
from jsonscope.schema.validator import validate
from tests.conftest import SAMPLE_DOCUMENT


class TestInferSchema:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("x", "string"),
            (None, "string"),
            (True, "boolean"),
            (7, "integer"),
            (2.0, "integer"),
            (2.5, "number"),
        ],
    )
    def test_primitives(self, value: object, expected: str) -> None:
        assert infer_schema(value) == {"type": expected}

    def test_array_uses_first_item(self) -> None:
        assert infer_schema([1, "a"]) == {"type": "array", "items": {"type": "integer"}}

    def test_empty_array_has_no_items(self) -> None:
        assert infer_schema([]) == {"type": "array"}

    def test_object_keys_are_required_in_order(self) -> None:
        schema = infer_schema({"b": 1, "a": {"c": []}})
        assert schema["required"] == ["b", "a"]
        assert schema["properties"]["a"] == {
            "type": "object",
            "properties": {"c": {"type": "array"}},
            "required": ["c"],
        }

    def test_empty_object_has_no_required(self) -> None:
        assert infer_schema({}) == {"type": "object", "properties": {}}


class TestSchemaFromDocument:
    def test_top_level_keywords(self) -> None:
        schema = schema_from_document({"id": 1}, "Record")
        assert schema["$schema"] == DRAFT_07
        assert schema["title"] == "Record"
        assert schema["description"] == "Schema inferred from Record"
        assert schema["type"] == "object"
        assert schema["required"] == ["id"]

    def test_explicit_description(self) -> None:
        schema = schema_from_document({"id": 1}, "Record", description="Rows")
        assert schema["description"] == "Rows"

    def test_example_validates_against_its_schema(self) -> None:
        document = json.loads(SAMPLE_DOCUMENT)
        assert validate(document, schema_from_document(document, "Person")) == []

    def test_non_object_is_rejected(self) -> None:
        with pytest.raises(InvalidSchemaError, match="JSON object"):
            schema_from_document([{"id": 1}], "Rows")
