"""Tolerant splitting of concatenated JSON documents (JSON Lines, pretty-printed runs)."""

from __future__ import annotations

import json
import logging
from typing import Any

from jsonscope.models.document import MultiDocResult
from jsonscope.parser.decoding import strict_loads

logger = logging.getLogger("jsonscope.parser")

_OPENERS = {"}": "{", "]": "["}


def _candidate_end(text: str, start: int) -> int | None:
    """Index just past the container that opens at *start*.

    Returns ``None`` for a mismatched closer or a container that never closes.
    Brackets inside strings are ignored; an escaped character never toggles
    the string state.
    """
    stack: list[str] = []
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if escaped:
            escaped = False
            continue
        if char == "\\":
            escaped = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue
        if char in "{[":
            stack.append(char)
        elif char in _OPENERS:
            if not stack or stack[-1] != _OPENERS[char]:
                return None
            stack.pop()
            if not stack:
                return index + 1
    return None


def parse_multi_document(text: str) -> MultiDocResult:
    """Split *text* into top-level JSON containers and decode each one.

    All or nothing: any non-container start, mismatched bracket, unclosed
    container or undecodable segment fails the whole scan, and so does input
    without a single document.
    """
    documents: list[Any] = []
    start_lines: list[int] = []
    pos = 0
    line = 1
    counted = 0
    end = len(text)

    while True:
        while pos < end and text[pos].isspace():
            pos += 1
        if pos >= end:
            break
        if text[pos] not in "{[":
            logger.debug("multi-document scan stopped at offset %d: not a container", pos)
            return MultiDocResult(success=False)

        stop = _candidate_end(text, pos)
        if stop is None:
            logger.debug("multi-document scan stopped at offset %d: unbalanced", pos)
            return MultiDocResult(success=False)
        try:
            documents.append(strict_loads(text[pos:stop]))
        except json.JSONDecodeError as exc:
            logger.debug("multi-document segment at offset %d is invalid: %s", pos, exc)
            return MultiDocResult(success=False)
        # Newlines are counted from the previous document start only.
        line += text.count("\n", counted, pos)
        counted = pos
        start_lines.append(line)
        pos = stop

    if not documents:
        return MultiDocResult(success=False)
    return MultiDocResult(success=True, documents=documents, start_lines=start_lines)
