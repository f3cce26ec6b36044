"""Derive a starter schema from an example document."""

from __future__ import annotations

from typing import Any

from jsonscope.models.schema import InvalidSchemaError

DRAFT_07 = "http://json-schema.org/draft-07/schema#"


def infer_schema(value: Any) -> dict[str, Any]:
    """Describe *value* with the schema keywords the validator understands.

    Every key of an example object is taken as required; arrays are described
    by their first item; ``null`` becomes ``string`` since it says nothing
    about the intended type.
    """
    if value is None:
        return {"type": "string"}
    if isinstance(value, list):
        schema: dict[str, Any] = {"type": "array"}
        if value:
            schema["items"] = infer_schema(value[0])
        return schema
    if isinstance(value, dict):
        schema = {"type": "object", "properties": {}}
        if value:
            schema["required"] = list(value)
        for key, item in value.items():
            schema["properties"][key] = infer_schema(item)
        return schema
    if isinstance(value, bool):
        return {"type": "boolean"}
    if isinstance(value, int):
        return {"type": "integer"}
    if isinstance(value, float):
        return {"type": "integer" if value.is_integer() else "number"}
    return {"type": "string"}


def schema_from_document(
    data: Any, title: str, description: str | None = None
) -> dict[str, Any]:
    """Wrap the inferred schema of an example object as a top-level schema."""
    if not isinstance(data, dict):
        raise InvalidSchemaError(
            "A schema can only be inferred from a JSON object, "
            f"got {type(data).__name__}"
        )
    inferred = infer_schema(data)
    schema: dict[str, Any] = {
        "$schema": DRAFT_07,
        "title": title,
        "description": description or f"Schema inferred from {title}",
        "type": "object",
        "properties": inferred["properties"],
    }
    if inferred.get("required"):
        schema["required"] = inferred["required"]
    return schema
