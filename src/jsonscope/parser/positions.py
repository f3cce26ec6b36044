"""Character offset to line/column translation."""

from __future__ import annotations

from jsonscope.models.errors import LineColumn


def map_offset_to_line_column(text: str, offset: int) -> LineColumn:
    """Return the 1-based line and column of *offset* in *text*."""
    if offset < 0 or offset > len(text):
        raise ValueError(f"Offset {offset} outside text of length {len(text)}")
    line = text.count("\n", 0, offset) + 1
    line_start = text.rfind("\n", 0, offset) + 1
    return LineColumn(line=line, column=offset - line_start + 1)
