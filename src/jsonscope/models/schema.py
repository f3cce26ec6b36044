"""The JSON-Schema-like node understood by the validation engine."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError


class SchemaType(StrEnum):
    OBJECT = "object"
    ARRAY = "array"
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    NULL = "null"


class InvalidSchemaError(ValueError):
    """Raised when a schema object does not have the SchemaNode shape."""


class SchemaNode(BaseModel):
    """One node of a schema.

    Unknown keywords (``$schema``, ``title``, ...) are kept as extras so a
    stored schema round-trips, but the engine only reads the fields below.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: SchemaType | None = None
    description: str | None = None

    # object
    properties: dict[str, SchemaNode] | None = None
    required: list[str] = []
    min_properties: int | None = Field(None, alias="minProperties")
    max_properties: int | None = Field(None, alias="maxProperties")

    # array
    items: SchemaNode | None = None
    min_items: int | None = Field(None, alias="minItems")
    max_items: int | None = Field(None, alias="maxItems")
    unique_items: bool = Field(False, alias="uniqueItems")

    # string
    min_length: int | None = Field(None, alias="minLength")
    max_length: int | None = Field(None, alias="maxLength")
    pattern: str | None = None

    # number / integer
    minimum: int | float | None = None
    maximum: int | float | None = None
    exclusive_minimum: int | float | None = Field(None, alias="exclusiveMinimum")
    exclusive_maximum: int | float | None = Field(None, alias="exclusiveMaximum")
    multiple_of: int | float | None = Field(None, alias="multipleOf")

    # any type
    enum: list[Any] | None = None

    @classmethod
    def coerce(cls, schema: SchemaNode | dict[str, Any]) -> SchemaNode:
        """Accept either a parsed SchemaNode or plain schema data."""
        if isinstance(schema, SchemaNode):
            return schema
        if not isinstance(schema, dict):
            raise InvalidSchemaError(
                f"Schema must be a JSON object, got {type(schema).__name__}"
            )
        try:
            return cls.model_validate(schema)
        except PydanticValidationError as exc:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
                for err in exc.errors()
            )
            raise InvalidSchemaError(f"Invalid schema: {problems}") from exc

    def to_data(self) -> dict[str, Any]:
        """Dump back to plain schema data using the JSON-Schema keyword names."""
        return self.model_dump(
            mode="json", by_alias=True, exclude_none=True, exclude_defaults=True
        )
