"""Structured error models with source line/column tracking."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class ViolationKind(StrEnum):
    INVALID_VALUE = "invalidValue"
    MISSING_PROPERTY = "missingProperty"
    ADDITIONAL_PROPERTY = "additionalProperty"


class LineColumn(BaseModel):
    """1-based line and column of a character offset in the source text."""

    line: int
    column: int


class SchemaViolation(BaseModel):
    """A single schema mismatch addressed by its slash-delimited logical path."""

    model_config = ConfigDict(frozen=True)

    path: str
    message: str
    kind: ViolationKind = ViolationKind.INVALID_VALUE
    document: int | None = None


class ParseFailure(BaseModel):
    """Why a text could not be decoded, and where when that is known."""

    message: str
    line: int | None = None
    column: int | None = None
    position: int | None = None
    likely_missing_comma: bool = False
