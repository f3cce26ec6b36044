"""Decoder failure reporting: offset to line/column, plus the missing-comma heuristic.

The standard decoder stops at the first problem and reports the offset where it
noticed it.  For a missing comma that offset is the start of the *next* value,
which is usually on the line after the real mistake, so the report is moved
back to the nearest preceding non-blank line when that line does not already
end in an opener or a comma.
"""

from __future__ import annotations

import json
import re

from jsonscope.models.errors import ParseFailure
from jsonscope.parser.positions import map_offset_to_line_column

# Offsets embedded in free-form decoder messages ("at position 12", "(char 12)").
_POSITION_RE = re.compile(r"at position (\d+)|\(char (\d+)\)")

# Decoder messages typical of a value that follows another without a comma.
_MISSING_COMMA_RE = re.compile(
    r"Expecting ',' delimiter"
    r"|Expected ','"
    r"|Unexpected string"
    r"|Unexpected number"
    r"|Unexpected token [\"tfn{\[]",
    re.IGNORECASE,
)

_COMMA_NOT_NEEDED_AFTER = ("{", "[", ",")


class StructuralParseError(ValueError):
    """Raised when a text is not valid JSON.

    The ``failure`` attribute carries the rewritten message and, when the
    decoder reported an offset, the line and column.
    """

    def __init__(self, failure: ParseFailure) -> None:
        super().__init__(failure.message)
        self.failure = failure


def explain_decode_failure(
    text: str, message: str, position: int | None = None
) -> ParseFailure:
    """Turn a decoder message (and optional offset) into a located ParseFailure.

    When *position* is not given, an offset embedded in *message* is used.
    Without any offset the message is returned as is and no heuristic runs.
    """
    embedded = _POSITION_RE.search(message)
    if position is None and embedded is not None:
        position = int(embedded.group(1) or embedded.group(2))
    if position is None or position < 0 or position > len(text):
        return ParseFailure(message=message)

    loc = map_offset_to_line_column(text, position)
    base = message[: embedded.start()].rstrip() if embedded else message.rstrip()
    tail = message[embedded.end() :] if embedded else ""

    if _MISSING_COMMA_RE.search(message) and loc.line > 1:
        previous = _previous_non_blank_line(text, loc.line)
        if previous is not None:
            index, raw_line = previous
            if not raw_line.strip().endswith(_COMMA_NOT_NEEDED_AFTER):
                line = index + 1
                # Point just past the last character, where the comma belongs.
                column = len(raw_line.rstrip()) + 1
                return ParseFailure(
                    message=(
                        f"Likely missing comma on line {line}.\n"
                        f"{base} (line {line}, column {column}){tail}"
                    ),
                    line=line,
                    column=column,
                    position=position,
                    likely_missing_comma=True,
                )

    return ParseFailure(
        message=f"{base} (line {loc.line}, column {loc.column}){tail}",
        line=loc.line,
        column=loc.column,
        position=position,
    )


def describe_decode_error(text: str, exc: json.JSONDecodeError) -> ParseFailure:
    """ParseFailure for a ``json.JSONDecodeError`` raised while decoding *text*."""
    return explain_decode_failure(text, exc.msg, exc.pos)


def _previous_non_blank_line(text: str, line: int) -> tuple[int, str] | None:
    """0-based index and raw content of the nearest non-blank line above *line*."""
    lines = text.split("\n")
    for index in range(line - 2, -1, -1):
        if lines[index].strip():
            return index, lines[index]
    return None
