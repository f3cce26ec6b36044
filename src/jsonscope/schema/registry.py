"""In-memory schema registry: schema key -> SchemaNode, shared by the API and MCP server."""

from __future__ import annotations

import json
import logging
import re
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from jsonscope.models.schema import InvalidSchemaError, SchemaNode
from jsonscope.schema.inference import schema_from_document

logger = logging.getLogger("jsonscope.schema")

_INDEX_FILE = "index.json"


def key_from_title(title: str) -> str:
    """camelCase registry key from a human title: ``"Order Lines v2"`` -> ``orderLinesV2``."""
    words = re.sub(r"[^a-z0-9\s]", "", title.strip().lower()).split()
    return "".join(
        word if i == 0 else word[:1].upper() + word[1:] for i, word in enumerate(words)
    )


def looks_like_schema(data: Any) -> bool:
    """An uploaded object is a schema when it declares ``$schema`` or ``properties``."""
    return isinstance(data, dict) and ("$schema" in data or "properties" in data)


@dataclass
class SchemaSummary:
    """Short summary for listing schemas."""

    key: str
    title: str | None
    description: str | None
    properties: int


@dataclass
class ImportResult:
    """Result of importing an uploaded document into the registry."""

    key: str
    schema: SchemaNode
    inferred: bool


class SchemaRegistry:
    """Thread-safe mapping from schema key to SchemaNode."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._schemas: dict[str, SchemaNode] = {}

    def put(self, key: str, schema: SchemaNode | dict[str, Any]) -> SchemaNode:
        if not key:
            raise InvalidSchemaError("Schema key must not be empty")
        node = SchemaNode.coerce(schema)
        with self._lock:
            self._schemas[key] = node
        return node

    def get(self, key: str) -> SchemaNode:
        with self._lock:
            node = self._schemas.get(key)
        if node is None:
            raise KeyError(f"No schema with key '{key}'")
        return node

    def remove(self, key: str) -> None:
        with self._lock:
            if key not in self._schemas:
                raise KeyError(f"No schema with key '{key}'")
            del self._schemas[key]

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._schemas)

    def summaries(self) -> list[SchemaSummary]:
        with self._lock:
            items = sorted(self._schemas.items())
        return [
            SchemaSummary(
                key=key,
                title=(node.model_extra or {}).get("title"),
                description=node.description,
                properties=len(node.properties or {}),
            )
            for key, node in items
        ]

    def import_document(
        self, data: Any, name: str, key: str | None = None
    ) -> ImportResult:
        """Store an uploaded document, inferring a schema when it is plain data.

        *name* (usually the uploaded file name without extension) is the
        fallback title; the key defaults to the camelCase form of the title.
        """
        inferred = False
        if looks_like_schema(data):
            schema_data = dict(data)
            schema_data.setdefault("title", name)
        elif isinstance(data, dict):
            schema_data = schema_from_document(
                data, name, description=f"Schema inferred from {name}"
            )
            inferred = True
        else:
            raise InvalidSchemaError("Only a JSON object can be imported as a schema")

        resolved_key = key or key_from_title(str(schema_data.get("title") or name))
        node = self.put(resolved_key, schema_data)
        logger.info("schema '%s' stored (inferred=%s)", resolved_key, inferred)
        return ImportResult(key=resolved_key, schema=node, inferred=inferred)

    def load_directory(self, root: Path) -> int:
        """Load bundled schemas from *root*; returns how many were stored.

        ``index.json`` (a list of file names) decides which files to read when
        present, otherwise every ``*.json`` file is read.  Each schema is keyed
        by its file stem.  Unreadable or malformed files are logged and skipped.
        """
        index_path = root / _INDEX_FILE
        if index_path.exists():
            filenames = json.loads(index_path.read_text(encoding="utf-8"))
            if not isinstance(filenames, list):
                raise InvalidSchemaError(f"{index_path} must contain a list of file names")
        else:
            filenames = sorted(p.name for p in root.glob("*.json"))

        loaded = 0
        for filename in filenames:
            path = root / str(filename)
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
                self.put(path.stem, data)
            except (OSError, json.JSONDecodeError, InvalidSchemaError) as exc:
                logger.error("Failed to load schema %s: %s", path, exc)
                continue
            loaded += 1
        logger.info("loaded %d schema(s) from %s", loaded, root)
        return loaded
