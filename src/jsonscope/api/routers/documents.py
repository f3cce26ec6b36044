"""Document endpoints: analyze, format and validate JSON / JSON Lines text."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, HTTPException

from jsonscope.api.deps import get_analyzer, get_schema_registry
from jsonscope.api.schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    FormatRequest,
    FormatResponse,
    ValidateRequest,
    ValidateResponse,
    ViolationDetail,
)
from jsonscope.models.errors import SchemaViolation, ViolationKind
from jsonscope.models.schema import InvalidSchemaError, SchemaNode
from jsonscope.parser.recovery import StructuralParseError
from jsonscope.schema.registry import SchemaRegistry
from jsonscope.schema.validator import validate_many
from jsonscope.service.analyzer import AnalysisResult, DocumentAnalyzer, DocumentTooLargeError
from jsonscope.service.formatter import beautify, minify

router = APIRouter()


# -- helpers -----------------------------------------------------------------


def _resolve_schema(
    schema_key: str | None,
    schema_data: dict[str, Any] | None,
    registry: SchemaRegistry,
) -> SchemaNode | dict[str, Any] | None:
    """Inline schema wins over a registry key; neither means no validation."""
    if schema_data is not None:
        return schema_data
    if schema_key is None:
        return None
    try:
        return registry.get(schema_key)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Schema '{schema_key}' not found") from None


def _detail(violation: SchemaViolation, line: int | None = None) -> ViolationDetail:
    return ViolationDetail(
        path=violation.path,
        message=violation.message,
        kind=violation.kind,
        document=violation.document,
        line=line,
    )


def _analysis_response(result: AnalysisResult) -> AnalyzeResponse:
    return AnalyzeResponse(
        status=result.status,
        mode=result.mode,
        documents=result.documents,
        start_lines=result.start_lines,
        path_lines=result.path_lines,
        failure=result.failure,
        schema_checked=result.schema_checked,
        elements_validated=result.elements_validated,
        valid=result.valid,
        errors=[_detail(v, result.line_for(v)) for v in result.errors],
        warnings=[_detail(v, result.line_for(v)) for v in result.warnings],
    )


# -- endpoints ---------------------------------------------------------------


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze_document(
    body: AnalyzeRequest,
    registry: SchemaRegistry = Depends(get_schema_registry),  # noqa: B008
    analyzer: DocumentAnalyzer = Depends(get_analyzer),  # noqa: B008
) -> AnalyzeResponse:
    """Parse text as one document or as concatenated documents, then validate."""
    schema = _resolve_schema(body.schema_key, body.schema_data, registry)
    try:
        result = analyzer.analyze(body.text, schema, body.check_additional_properties)
    except DocumentTooLargeError as exc:
        raise HTTPException(status_code=413, detail=str(exc)) from None
    except InvalidSchemaError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from None
    return _analysis_response(result)


@router.post("/format", response_model=FormatResponse)
async def format_document(body: FormatRequest) -> FormatResponse:
    """Beautify or minify text holding one or more JSON documents."""
    formatter = beautify if body.style == "beautify" else minify
    try:
        return FormatResponse(text=formatter(body.text))
    except StructuralParseError as exc:
        raise HTTPException(
            status_code=422,
            detail={
                "message": "Invalid JSON: the text could not be parsed",
                "failure": exc.failure.model_dump(),
            },
        ) from None


@router.post("/validate", response_model=ValidateResponse)
async def validate_documents(
    body: ValidateRequest,
    registry: SchemaRegistry = Depends(get_schema_registry),  # noqa: B008
    analyzer: DocumentAnalyzer = Depends(get_analyzer),  # noqa: B008
) -> ValidateResponse:
    """Validate already decoded documents against a schema."""
    schema = _resolve_schema(body.schema_key, body.schema_data, registry)
    if schema is None:
        raise HTTPException(status_code=422, detail="Either 'schema' or 'schema_key' is required")
    check = body.check_additional_properties
    if check is None:
        check = analyzer.check_additional_properties
    try:
        violations = validate_many(body.documents, schema, check)
    except InvalidSchemaError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from None
    errors = [v for v in violations if v.kind != ViolationKind.ADDITIONAL_PROPERTY]
    warnings = [v for v in violations if v.kind == ViolationKind.ADDITIONAL_PROPERTY]
    return ValidateResponse(
        valid=not errors,
        errors=[_detail(v) for v in errors],
        warnings=[_detail(v) for v in warnings],
    )
