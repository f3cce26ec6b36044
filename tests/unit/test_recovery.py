"""Tests for decoder failure location and the missing-comma heuristic."""

from __future__ import annotations

import json

import pytest

from jsonscope.models.errors import ParseFailure
from jsonscope.parser.recovery import describe_decode_error, explain_decode_failure


def _failure(text: str) -> ParseFailure:
    with pytest.raises(json.JSONDecodeError) as info:
        json.loads(text)
    return describe_decode_error(text, info.value)


class TestDescribeDecodeError:
    def test_missing_comma_on_first_line(self) -> None:
        text = '{"a": 1 "b": 2}'
        failure = _failure(text)
        assert failure.position == text.index('"b"')
        assert (failure.line, failure.column) == (1, 9)
        assert "(line 1, column 9)" in failure.message
        assert not failure.likely_missing_comma

    def test_missing_comma_relocated_to_previous_line(self) -> None:
        failure = _failure('{\n  "a": 1\n  "b": 2\n}')
        assert failure.likely_missing_comma
        assert failure.line == 2
        assert failure.column == len('  "a": 1') + 1
        assert failure.message.startswith("Likely missing comma on line 2.\n")
        assert "(line 2, column 9)" in failure.message

    def test_blank_lines_are_skipped(self) -> None:
        failure = _failure('{\n  "a": 1\n\n   \n  "b": 2\n}')
        assert failure.likely_missing_comma
        assert failure.line == 2

    def test_missing_comma_between_array_items(self) -> None:
        failure = _failure("[\n  1,\n  2\n  3\n]")
        assert failure.likely_missing_comma
        assert failure.line == 3

    def test_previous_line_ending_with_opener_is_not_blamed(self) -> None:
        failure = _failure('{\n  "a": {\n    "b": 1 "c": 2\n  }\n}')
        assert not failure.likely_missing_comma
        assert failure.line == 3

    def test_other_errors_are_not_relocated(self) -> None:
        failure = _failure('{\n  "a": 1,\n  "b" 2\n}')
        assert not failure.likely_missing_comma
        assert failure.line == 3
        assert failure.message.startswith("Expecting ':' delimiter")

    def test_trailing_comma_is_not_a_missing_comma(self) -> None:
        failure = _failure('{\n  "a": 1,\n}')
        assert not failure.likely_missing_comma
        assert failure.line is not None


class TestExplainDecodeFailure:
    def test_without_position_message_is_unchanged(self) -> None:
        failure = explain_decode_failure("{", "Unexpected end of JSON input")
        assert failure.message == "Unexpected end of JSON input"
        assert failure.line is None
        assert failure.column is None

    def test_embedded_position_is_rewritten(self) -> None:
        text = '{"a": 1 "b": 2}'
        failure = explain_decode_failure(text, "Unexpected string in JSON at position 8")
        assert failure.message == "Unexpected string in JSON (line 1, column 9)"
        assert failure.position == 8

    def test_embedded_position_with_relocation(self) -> None:
        text = '{\n"a": 1\n"b": 2}'
        failure = explain_decode_failure(text, "Unexpected string in JSON at position 9")
        assert failure.likely_missing_comma
        assert failure.message == (
            "Likely missing comma on line 2.\nUnexpected string in JSON (line 2, column 7)"
        )

    def test_char_offset_form(self) -> None:
        failure = explain_decode_failure("ab\ncd", "Expecting value (char 3)")
        assert (failure.line, failure.column) == (2, 1)

    def test_out_of_range_position_is_ignored(self) -> None:
        failure = explain_decode_failure("ab", "Broken", position=99)
        assert failure.message == "Broken"
        assert failure.line is None
