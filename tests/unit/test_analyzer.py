"""Tests for the document analysis service."""

from __future__ import annotations

import pytest

from jsonscope.models.errors import ViolationKind
from jsonscope.models.schema import InvalidSchemaError
from jsonscope.service.analyzer import (
    AnalysisStatus,
    DocumentAnalyzer,
    DocumentMode,
    DocumentTooLargeError,
)
from tests.conftest import (
    PERSON_SCHEMA,
    RECORD_SCHEMA,
    SAMPLE_DOCUMENT,
    SAMPLE_JSON_LINES,
    SAMPLE_PRETTY_MULTI,
)


class TestParsing:
    def test_blank_text_is_idle(self, analyzer: DocumentAnalyzer) -> None:
        result = analyzer.analyze("  \n ")
        assert result.status == AnalysisStatus.IDLE
        assert result.mode is None
        assert not result.valid

    def test_single_document(self, analyzer: DocumentAnalyzer) -> None:
        result = analyzer.analyze(SAMPLE_DOCUMENT)
        assert result.status == AnalysisStatus.SUCCESS
        assert result.mode == DocumentMode.SINGLE
        assert result.start_lines == [1]
        assert result.path_lines[0]["root/address/city"] == 6
        assert result.valid
        assert not result.schema_checked

    def test_single_document_start_line_skips_blank_lines(
        self, analyzer: DocumentAnalyzer
    ) -> None:
        result = analyzer.analyze('\n\n{"a": 1}')
        assert result.start_lines == [3]

    def test_concatenated_documents(self, analyzer: DocumentAnalyzer) -> None:
        result = analyzer.analyze(SAMPLE_PRETTY_MULTI)
        assert result.mode == DocumentMode.MULTI
        assert result.documents == [{"id": 1}, {"id": 2}]
        assert result.start_lines == [1, 5]
        assert result.path_lines[1] == {"root": 5, "root/id": 5}

    def test_invalid_text_reports_located_failure(self, analyzer: DocumentAnalyzer) -> None:
        result = analyzer.analyze('{\n  "a": 1\n  "b": 2\n}')
        assert result.status == AnalysisStatus.ERROR
        assert result.failure is not None
        assert result.failure.likely_missing_comma
        assert result.failure.line == 2
        assert result.documents == []

    def test_too_large(self) -> None:
        analyzer = DocumentAnalyzer(max_document_size=10)
        with pytest.raises(DocumentTooLargeError, match="exceeds maximum size"):
            analyzer.analyze('{"a": "0123456789"}')


class TestValidation:
    def test_violation_lines_single(self, analyzer: DocumentAnalyzer) -> None:
        schema = PERSON_SCHEMA | {
            "properties": PERSON_SCHEMA["properties"]
            | {"address": {"type": "object", "properties": {"city": {"type": "integer"}}}}
        }
        result = analyzer.analyze(SAMPLE_DOCUMENT, schema)
        assert result.schema_checked
        (error,) = result.errors
        assert error.path == "root/address/city"
        assert result.line_for(error) == 6
        assert not result.valid

    def test_missing_property_points_at_parent(self, analyzer: DocumentAnalyzer) -> None:
        result = analyzer.analyze('{\n  "name": "Ada"\n}', PERSON_SCHEMA)
        (error,) = result.errors
        assert error.kind == ViolationKind.MISSING_PROPERTY
        assert result.line_for(error) == 1

    def test_violation_lines_multi(self, analyzer: DocumentAnalyzer) -> None:
        result = analyzer.analyze('{"id": 1}\n\n{"id": "two"}', RECORD_SCHEMA)
        (error,) = result.errors
        assert error.document == 1
        assert error.message.startswith("[document 2]")
        assert result.line_for(error) == 3

    def test_json_lines_valid(self, analyzer: DocumentAnalyzer) -> None:
        result = analyzer.analyze(SAMPLE_JSON_LINES, RECORD_SCHEMA)
        assert result.valid
        assert result.violations == []

    def test_additional_properties_are_warnings(self) -> None:
        analyzer = DocumentAnalyzer(check_additional_properties=True)
        result = analyzer.analyze('{"id": 1, "x": 2}', RECORD_SCHEMA)
        assert result.errors == []
        assert [w.path for w in result.warnings] == ["root/x"]
        assert result.valid

    def test_call_overrides_default(self) -> None:
        analyzer = DocumentAnalyzer(check_additional_properties=True)
        assert analyzer.check_additional_properties
        result = analyzer.analyze(
            '{"id": 1, "x": 2}', RECORD_SCHEMA, check_additional_properties=False
        )
        assert result.warnings == []

    def test_schema_is_skipped_for_invalid_text(self, analyzer: DocumentAnalyzer) -> None:
        result = analyzer.analyze("{", RECORD_SCHEMA)
        assert result.status == AnalysisStatus.ERROR
        assert not result.schema_checked

    def test_invalid_schema_raises(self, analyzer: DocumentAnalyzer) -> None:
        with pytest.raises(InvalidSchemaError):
            analyzer.analyze('{"id": 1}', {"required": "id"})

    def test_unknown_path_has_no_line(self, analyzer: DocumentAnalyzer) -> None:
        result = analyzer.analyze('{"id": 1}\n{"id": "x"}', RECORD_SCHEMA)
        error = result.errors[0].model_copy(update={"document": 9})
        assert result.line_for(error) is None


class TestTopLevelArray:
    def test_elements_are_validated_one_by_one(self, analyzer: DocumentAnalyzer) -> None:
        result = analyzer.analyze('[{"a": 1}, {"a": "x"}]', {"type": "object"})
        assert result.elements_validated
        assert result.valid

    def test_element_violation_lines(self, analyzer: DocumentAnalyzer) -> None:
        result = analyzer.analyze('[\n  {"id": 1},\n  {"id": "x"}\n]', RECORD_SCHEMA)
        (error,) = result.errors
        assert error.path == "root/id"
        assert error.document == 1
        assert error.message.startswith("[document 2]")
        assert result.line_for(error) == 3

    def test_single_element_is_not_numbered(self, analyzer: DocumentAnalyzer) -> None:
        result = analyzer.analyze('[\n  {"name": "a"}\n]', RECORD_SCHEMA)
        (error,) = result.errors
        assert error.document is None
        assert error.kind == ViolationKind.MISSING_PROPERTY
        assert result.line_for(error) == 2

    def test_empty_array_has_nothing_to_check(self, analyzer: DocumentAnalyzer) -> None:
        result = analyzer.analyze("[]", {"type": "object", "required": ["id"]})
        assert result.schema_checked
        assert result.violations == []

    def test_arrays_in_multi_mode_are_whole_instances(
        self, analyzer: DocumentAnalyzer
    ) -> None:
        result = analyzer.analyze("[1]\n[2]", {"type": "array"})
        assert not result.elements_validated
        assert result.valid
