"""Shared test fixtures for jsonscope."""

from __future__ import annotations

from typing import Any

import pytest

from jsonscope.schema.registry import SchemaRegistry
from jsonscope.schema.validator import SchemaValidator
from jsonscope.service.analyzer import DocumentAnalyzer


@pytest.fixture
def validator() -> SchemaValidator:
    return SchemaValidator()


@pytest.fixture
def registry() -> SchemaRegistry:
    return SchemaRegistry()


@pytest.fixture
def analyzer() -> DocumentAnalyzer:
    return DocumentAnalyzer()


# Line numbers matter: "name" is on line 2, "city" on line 6, "zip" on line 7.
SAMPLE_DOCUMENT = """\
{
  "name": "Ada",
  "age": 36,
  "tags": ["math", "engines"],
  "address": {
    "city": "London",
    "zip": "N1"
  }
}
"""

SAMPLE_JSON_LINES = '{"id": 1, "name": "first"}\n{"id": 2, "name": "second"}\n'

SAMPLE_PRETTY_MULTI = """\
{
  "id": 1
}

{
  "id": 2
}
"""

PERSON_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Person",
    "type": "object",
    "required": ["name", "age"],
    "properties": {
        "name": {"type": "string", "minLength": 2},
        "age": {"type": "integer", "minimum": 0},
        "tags": {"type": "array", "items": {"type": "string"}, "uniqueItems": True},
        "address": {
            "type": "object",
            "properties": {"city": {"type": "string"}},
        },
    },
}

RECORD_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["id"],
    "properties": {"id": {"type": "integer"}, "name": {"type": "string"}},
}
