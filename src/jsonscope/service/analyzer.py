"""Document analysis: the core service layer reusable by MCP and REST API.

One call takes raw text (and optionally a schema) and decides how to read it:
as a single document with per-key lines, as concatenated documents with
per-document lines, or as a failure located by the recovery heuristics.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from jsonscope.models.errors import ParseFailure, SchemaViolation, ViolationKind
from jsonscope.models.schema import SchemaNode
from jsonscope.parser.locator import (
    ROOT_PATH,
    build_document_line_maps,
    build_path_line_map,
    parse_with_locations,
)
from jsonscope.parser.positions import map_offset_to_line_column
from jsonscope.parser.recovery import StructuralParseError
from jsonscope.parser.scanner import parse_multi_document
from jsonscope.schema.validator import validate_many

logger = logging.getLogger("jsonscope.service")

_MAX_DOCUMENT_SIZE = 5_000_000  # characters


class DocumentTooLargeError(ValueError):
    """Raised when input text exceeds the configured size limit."""


class AnalysisStatus(StrEnum):
    IDLE = "idle"
    SUCCESS = "success"
    ERROR = "error"


class DocumentMode(StrEnum):
    SINGLE = "single"
    MULTI = "multi"


@dataclass
class AnalysisResult:
    """Outcome of analysing one text.

    ``path_lines`` holds one path -> line index per document: per-key lines
    for a single document, the document's start line everywhere for
    concatenated documents.
    """

    status: AnalysisStatus
    mode: DocumentMode | None = None
    documents: list[Any] = field(default_factory=list)
    start_lines: list[int] = field(default_factory=list)
    path_lines: list[dict[str, int]] = field(default_factory=list)
    failure: ParseFailure | None = None
    violations: list[SchemaViolation] = field(default_factory=list)
    schema_checked: bool = False
    elements_validated: bool = False

    @property
    def errors(self) -> list[SchemaViolation]:
        return [v for v in self.violations if v.kind != ViolationKind.ADDITIONAL_PROPERTY]

    @property
    def warnings(self) -> list[SchemaViolation]:
        return [v for v in self.violations if v.kind == ViolationKind.ADDITIONAL_PROPERTY]

    @property
    def valid(self) -> bool:
        return self.status == AnalysisStatus.SUCCESS and not self.errors

    def line_for(self, violation: SchemaViolation) -> int | None:
        """Source line of the value a violation points at, when known."""
        index = violation.document or 0
        if self.elements_validated:
            # Element paths live under root/<index> of the single document.
            path = f"{ROOT_PATH}/{index}{violation.path[len(ROOT_PATH):]}"
            return self.path_lines[0].get(path) if self.path_lines else None
        if index >= len(self.path_lines):
            return None
        return self.path_lines[index].get(violation.path)


class DocumentAnalyzer:
    """Parses text tolerantly and validates the result against a schema."""

    def __init__(
        self,
        max_document_size: int = _MAX_DOCUMENT_SIZE,
        check_additional_properties: bool = False,
    ) -> None:
        self._max_document_size = max_document_size
        self._check_additional_properties = check_additional_properties

    @property
    def check_additional_properties(self) -> bool:
        """Default used when a call does not say whether to flag extra keys."""
        return self._check_additional_properties

    def analyze(
        self,
        text: str,
        schema: SchemaNode | dict[str, Any] | None = None,
        check_additional_properties: bool | None = None,
    ) -> AnalysisResult:
        """Parse *text* and, when *schema* is given, validate every document.

        Raises ``DocumentTooLargeError`` for oversized input and
        ``InvalidSchemaError`` for a schema without the SchemaNode shape.
        """
        if len(text) > self._max_document_size:
            raise DocumentTooLargeError(
                f"Document exceeds maximum size "
                f"({len(text):,} chars > {self._max_document_size:,} limit)"
            )
        if not text.strip():
            return AnalysisResult(status=AnalysisStatus.IDLE)

        result = self._parse(text)
        if result.status != AnalysisStatus.SUCCESS or schema is None:
            return result

        if check_additional_properties is None:
            check_additional_properties = self._check_additional_properties
        instances = result.documents
        if result.mode == DocumentMode.SINGLE and isinstance(instances[0], list):
            # A top-level array is a batch: each element is one instance.
            instances = instances[0]
            result.elements_validated = True
        result.violations = validate_many(instances, schema, check_additional_properties)
        result.schema_checked = True
        logger.debug(
            "validated %d instance(s): %d violation(s)",
            len(instances),
            len(result.violations),
        )
        return result

    def _parse(self, text: str) -> AnalysisResult:
        try:
            located = parse_with_locations(text)
        except StructuralParseError as exc:
            failure = exc.failure
        else:
            first = len(text) - len(text.lstrip())
            return AnalysisResult(
                status=AnalysisStatus.SUCCESS,
                mode=DocumentMode.SINGLE,
                documents=[located.parsed],
                start_lines=[map_offset_to_line_column(text, first).line],
                path_lines=[build_path_line_map(located.parsed, located.locations)],
            )

        multi = parse_multi_document(text)
        if multi.success:
            logger.debug("read %d concatenated document(s)", len(multi.documents))
            return AnalysisResult(
                status=AnalysisStatus.SUCCESS,
                mode=DocumentMode.MULTI,
                documents=multi.documents,
                start_lines=multi.start_lines,
                path_lines=build_document_line_maps(multi.documents, multi.start_lines),
            )

        logger.debug("text is not valid JSON: %s", failure.message)
        return AnalysisResult(status=AnalysisStatus.ERROR, failure=failure)
