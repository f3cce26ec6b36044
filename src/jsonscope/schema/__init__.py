"""Schema validation, inference and the schema registry."""

from jsonscope.schema.inference import infer_schema, schema_from_document
from jsonscope.schema.registry import SchemaRegistry, key_from_title
from jsonscope.schema.validator import SchemaValidator, validate, validate_many

__all__ = [
    "SchemaRegistry",
    "SchemaValidator",
    "infer_schema",
    "key_from_title",
    "schema_from_document",
    "validate",
    "validate_many",
]
