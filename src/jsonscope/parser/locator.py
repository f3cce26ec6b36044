"""Single-document JSON parsing with line tracking for every object key."""

from __future__ import annotations

import json
from dataclasses import dataclass
from json.decoder import scanstring
from typing import Any

from jsonscope.models.document import LocatedDocument, LocationEntry
from jsonscope.parser.decoding import strict_loads
from jsonscope.parser.recovery import StructuralParseError, describe_decode_error

ROOT_PATH = "root"

# Joins an original key and its per-parse uid into the location map key.
UID_SEPARATOR = "__JSON_LOC_UID__"


@dataclass
class _Frame:
    """An open container while scanning: its path and where we are inside it."""

    path: str
    is_object: bool
    index: int = 0
    key: str | None = None
    expecting_key: bool = True

    def child_path(self) -> str:
        if self.is_object:
            return f"{self.path}/{self.key}"
        return f"{self.path}/{self.index}"


def parse_with_locations(text: str) -> LocatedDocument:
    """Decode one JSON document and record the line of every object key.

    The text is decoded once with the strict standard decoder; a second,
    token-level pass over the (now known to be valid) text yields each key's
    line and logical path.  Blank input returns an empty result without
    decoding.

    Raises ``StructuralParseError`` when the text is not a single valid JSON
    document.
    """
    if not text.strip():
        return LocatedDocument()
    try:
        parsed = strict_loads(text)
    except json.JSONDecodeError as exc:
        raise StructuralParseError(describe_decode_error(text, exc)) from exc
    return LocatedDocument(parsed=parsed, locations=scan_key_locations(text))


def scan_key_locations(text: str) -> dict[str, LocationEntry]:
    """Emit a LocationEntry for every object key of a valid JSON text.

    Keys are numbered in source order starting from 1 on every call, so
    repeated keys in one object still get distinct map entries.
    """
    locations: dict[str, LocationEntry] = {}
    stack: list[_Frame] = []
    uid = 0
    line = 1
    line_start = 0
    pos = 0
    end = len(text)

    while pos < end:
        char = text[pos]
        if char == '"':
            # Strict JSON strings cannot contain raw newlines, so line
            # bookkeeping only happens outside of them.
            value, after = scanstring(text, pos + 1)
            frame = stack[-1] if stack else None
            if frame is not None and frame.is_object and frame.expecting_key:
                uid += 1
                locations[f"{value}{UID_SEPARATOR}{uid}"] = LocationEntry(
                    original_key=value,
                    line=line,
                    column=pos - line_start + 1,
                    path=f"{frame.path}/{value}",
                )
                frame.key = value
                frame.expecting_key = False
            pos = after
            continue

        if char == "\n":
            line += 1
            line_start = pos + 1
        elif char in "{[":
            path = stack[-1].child_path() if stack else ROOT_PATH
            stack.append(_Frame(path=path, is_object=char == "{"))
        elif char in "}]":
            stack.pop()
        elif char == ",":
            frame = stack[-1]
            if frame.is_object:
                frame.expecting_key = True
            else:
                frame.index += 1
        pos += 1

    return locations


def build_path_line_map(
    parsed: Any, locations: dict[str, LocationEntry]
) -> dict[str, int]:
    """Map logical paths (``root/users/0/name``) of *parsed* to source lines.

    Array items carry no key of their own and inherit their array's line.
    """
    # Source order: a repeated key's last occurrence wins, like the decoder.
    key_lines = {entry.path: entry.line for entry in locations.values()}
    path_lines: dict[str, int] = {ROOT_PATH: 1}

    def _traverse(node: Any, path: str) -> None:
        if isinstance(node, list):
            parent_line = path_lines.get(path)
            for index, item in enumerate(node):
                item_path = f"{path}/{index}"
                if parent_line is not None:
                    path_lines[item_path] = parent_line
                if isinstance(item, (dict, list)):
                    _traverse(item, item_path)
        elif isinstance(node, dict):
            for key, value in node.items():
                item_path = f"{path}/{key}"
                key_line = key_lines.get(item_path)
                if key_line is None:
                    continue
                path_lines[item_path] = key_line
                if isinstance(value, (dict, list)):
                    _traverse(value, item_path)

    _traverse(parsed, ROOT_PATH)
    return path_lines


def build_document_line_maps(
    documents: list[Any], start_lines: list[int]
) -> list[dict[str, int]]:
    """Coarse path index for multi-document input.

    Every path inside document *i* maps to that document's start line.
    """
    maps: list[dict[str, int]] = []
    for document, start_line in zip(documents, start_lines, strict=True):
        path_lines: dict[str, int] = {}
        stack: list[tuple[str, Any]] = [(ROOT_PATH, document)]
        while stack:
            path, node = stack.pop()
            path_lines[path] = start_line
            if isinstance(node, dict):
                stack.extend((f"{path}/{key}", value) for key, value in node.items())
            elif isinstance(node, list):
                stack.extend((f"{path}/{i}", item) for i, item in enumerate(node))
        maps.append(path_lines)
    return maps
