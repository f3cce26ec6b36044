"""Pretty-print and compact single or concatenated JSON documents."""

from __future__ import annotations

import json
from typing import Any

from jsonscope.parser.decoding import strict_loads
from jsonscope.parser.recovery import StructuralParseError, describe_decode_error
from jsonscope.parser.scanner import parse_multi_document


def _decode(text: str) -> tuple[list[Any], bool]:
    """Decoded documents and whether the text held more than one."""
    try:
        return [strict_loads(text)], False
    except json.JSONDecodeError as exc:
        multi = parse_multi_document(text)
        if not multi.success:
            raise StructuralParseError(describe_decode_error(text, exc)) from exc
        return multi.documents, True


def beautify(text: str) -> str:
    """Indent by two spaces; concatenated documents are separated by a blank line."""
    if not text.strip():
        return text
    documents, multi = _decode(text)
    rendered = [json.dumps(doc, indent=2, ensure_ascii=False) for doc in documents]
    return "\n\n".join(rendered) if multi else rendered[0]


def minify(text: str) -> str:
    """Compact form; concatenated documents become one document per line."""
    if not text.strip():
        return text
    documents, multi = _decode(text)
    rendered = [
        json.dumps(doc, separators=(",", ":"), ensure_ascii=False) for doc in documents
    ]
    return "\n".join(rendered) if multi else rendered[0]
