"""Strict JSON decoding: standard literals only."""

from __future__ import annotations

import json
import re
from json.decoder import scanstring
from typing import Any

# A string opener or one of the constants ``json`` accepts beyond the standard.
_TOKEN_RE = re.compile(r'"|-?Infinity|NaN')


class _NonStandardConstant(ValueError):
    pass


def _reject_constant(name: str) -> Any:
    raise _NonStandardConstant(name)


def _constant_offset(text: str) -> int:
    """Offset of the first ``NaN``/``Infinity``/``-Infinity`` outside a string."""
    pos = 0
    while True:
        match = _TOKEN_RE.search(text, pos)
        if match is None:
            return 0
        if match.group() != '"':
            return match.start()
        _, pos = scanstring(text, match.end())


def strict_loads(text: str) -> Any:
    """``json.loads`` that rejects ``NaN``, ``Infinity`` and ``-Infinity``.

    A rejected constant raises ``json.JSONDecodeError`` positioned at the
    constant, like any other syntax error.
    """
    try:
        return json.loads(text, parse_constant=_reject_constant)
    except _NonStandardConstant as exc:
        raise json.JSONDecodeError(
            f"Invalid constant '{exc}': not a JSON literal",
            text,
            _constant_offset(text),
        ) from None
