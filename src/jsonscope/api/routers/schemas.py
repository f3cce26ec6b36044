"""Schema registry endpoints: list, fetch, store, upload, infer, delete."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException

from jsonscope.api.deps import get_schema_registry
from jsonscope.api.schemas import (
    SchemaInferRequest,
    SchemaListResponse,
    SchemaResponse,
    SchemaSummaryResponse,
    SchemaUploadRequest,
)
from jsonscope.models.schema import InvalidSchemaError
from jsonscope.schema.inference import infer_schema, schema_from_document
from jsonscope.schema.registry import SchemaRegistry

router = APIRouter()


@router.get("", response_model=SchemaListResponse)
async def list_schemas(
    registry: SchemaRegistry = Depends(get_schema_registry),  # noqa: B008
) -> SchemaListResponse:
    """List all registered schemas."""
    return SchemaListResponse(
        schemas=[
            SchemaSummaryResponse(
                key=s.key, title=s.title, description=s.description, properties=s.properties
            )
            for s in registry.summaries()
        ]
    )


@router.post("", response_model=SchemaResponse, status_code=201)
async def upload_schema(
    body: SchemaUploadRequest,
    registry: SchemaRegistry = Depends(get_schema_registry),  # noqa: B008
) -> SchemaResponse:
    """Store an uploaded schema, or infer one from an example object."""
    try:
        result = registry.import_document(body.document, body.name, key=body.key)
    except InvalidSchemaError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from None
    return SchemaResponse(
        key=result.key, schema_data=result.schema.to_data(), inferred=result.inferred
    )


@router.post("/infer")
async def infer(body: SchemaInferRequest) -> dict[str, Any]:
    """Infer a schema from an example document without storing it."""
    if isinstance(body.document, dict):
        return schema_from_document(body.document, body.title)
    return infer_schema(body.document)


@router.get("/{key}", response_model=SchemaResponse)
async def get_schema(
    key: str,
    registry: SchemaRegistry = Depends(get_schema_registry),  # noqa: B008
) -> SchemaResponse:
    """Fetch a registered schema."""
    try:
        node = registry.get(key)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Schema '{key}' not found") from None
    return SchemaResponse(key=key, schema_data=node.to_data())


@router.put("/{key}", response_model=SchemaResponse)
async def put_schema(
    key: str,
    schema: dict[str, Any] = Body(...),  # noqa: B008
    registry: SchemaRegistry = Depends(get_schema_registry),  # noqa: B008
) -> SchemaResponse:
    """Create or replace a schema under *key*."""
    try:
        node = registry.put(key, schema)
    except InvalidSchemaError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from None
    return SchemaResponse(key=key, schema_data=node.to_data())


@router.delete("/{key}", status_code=204)
async def delete_schema(
    key: str,
    registry: SchemaRegistry = Depends(get_schema_registry),  # noqa: B008
) -> None:
    """Remove a schema from the registry."""
    try:
        registry.remove(key)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Schema '{key}' not found") from None
