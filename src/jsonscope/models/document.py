"""Parse results: located single documents and multi-document scans."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class LocationEntry(BaseModel):
    """Where one object key starts in the source text."""

    original_key: str
    line: int
    column: int = 1
    path: str = ""


class LocatedDocument(BaseModel):
    """A decoded document plus the location of every object key in it.

    ``locations`` is keyed by the tagged key (original key, separator and a
    per-parse uid), so duplicate keys keep distinct entries.
    """

    parsed: Any = None
    locations: dict[str, LocationEntry] = Field(default_factory=dict)


class MultiDocResult(BaseModel):
    """Result of splitting a text into concatenated top-level JSON documents."""

    success: bool
    documents: list[Any] = Field(default_factory=list)
    start_lines: list[int] = Field(default_factory=list)
