"""API request/response Pydantic schemas."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from jsonscope.models.errors import ParseFailure, ViolationKind


class ViolationDetail(BaseModel):
    """A single schema violation, with its source line when known."""

    path: str
    message: str
    kind: ViolationKind
    document: int | None = None
    line: int | None = None


class AnalyzeRequest(BaseModel):
    """Request body for POST /documents/analyze.

    Give either ``schema_key`` (a registered schema) or an inline ``schema``.
    """

    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(description="Raw JSON or JSON Lines text")
    schema_key: str | None = None
    schema_data: dict[str, Any] | None = Field(None, alias="schema")
    check_additional_properties: bool | None = None


class AnalyzeResponse(BaseModel):
    """Response body for POST /documents/analyze."""

    status: str
    mode: str | None = None
    documents: list[Any] = []
    start_lines: list[int] = []
    path_lines: list[dict[str, int]] = []
    failure: ParseFailure | None = None
    schema_checked: bool = False
    elements_validated: bool = False
    valid: bool = False
    errors: list[ViolationDetail] = []
    warnings: list[ViolationDetail] = []


class FormatRequest(BaseModel):
    """Request body for POST /documents/format."""

    text: str
    style: Literal["beautify", "minify"] = "beautify"


class FormatResponse(BaseModel):
    """Response body for POST /documents/format."""

    text: str


class ValidateRequest(BaseModel):
    """Request body for POST /documents/validate (already decoded documents)."""

    model_config = ConfigDict(populate_by_name=True)

    documents: list[Any]
    schema_key: str | None = None
    schema_data: dict[str, Any] | None = Field(None, alias="schema")
    check_additional_properties: bool | None = None


class ValidateResponse(BaseModel):
    """Response body for POST /documents/validate."""

    valid: bool
    errors: list[ViolationDetail] = []
    warnings: list[ViolationDetail] = []


class HealthResponse(BaseModel):
    """Health check response."""

    status: str = "ok"
    version: str = ""


# ---------------------------------------------------------------------------
# Schema registry schemas
# ---------------------------------------------------------------------------


class SchemaSummaryResponse(BaseModel):
    """Short schema summary for listing."""

    key: str
    title: str | None = None
    description: str | None = None
    properties: int = 0


class SchemaListResponse(BaseModel):
    """Response for GET /schemas."""

    schemas: list[SchemaSummaryResponse]


class SchemaResponse(BaseModel):
    """A stored schema."""

    model_config = ConfigDict(populate_by_name=True)

    key: str
    schema_data: dict[str, Any] = Field(alias="schema")
    inferred: bool = False


class SchemaUploadRequest(BaseModel):
    """Request body for POST /schemas.

    ``document`` is either a schema (has ``$schema`` or ``properties``) or an
    example object to infer one from.
    """

    document: dict[str, Any]
    name: str = Field(description="Fallback title, e.g. the uploaded file name")
    key: str | None = None


class SchemaInferRequest(BaseModel):
    """Request body for POST /schemas/infer."""

    document: Any
    title: str = "Untitled Schema"
