"""FastMCP server exposing jsonscope's parsing and validation as MCP tools.

Run via::

    jsonscope-mcp                       # reads .env (default: stdio)
    MCP_TRANSPORT=http jsonscope-mcp    # streamable HTTP on port 9000
    MCP_TRANSPORT=sse  jsonscope-mcp    # legacy SSE on port 9000

Schemas registered with ``save_schema`` live in one process-wide registry.
Settings are loaded from environment variables and ``.env`` file.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError

from jsonscope import __version__
from jsonscope.models.schema import InvalidSchemaError, SchemaNode
from jsonscope.parser.recovery import StructuralParseError
from jsonscope.schema.inference import infer_schema, schema_from_document
from jsonscope.schema.registry import SchemaRegistry
from jsonscope.service.analyzer import (
    AnalysisResult,
    AnalysisStatus,
    DocumentAnalyzer,
    DocumentTooLargeError,
)
from jsonscope.service.formatter import beautify, minify
from jsonscope.settings import Settings

# ---------------------------------------------------------------------------
# Server + shared state
# ---------------------------------------------------------------------------

logger = logging.getLogger("jsonscope.mcp")

mcp = FastMCP("jsonscope")
_registry = SchemaRegistry()
_analyzer = DocumentAnalyzer()


def _load_json_argument(value: str, name: str) -> Any:
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise ToolError(f"'{name}' is not valid JSON: {exc}") from exc


def _resolve_schema(
    schema_key: str | None, schema_json: str | None
) -> SchemaNode | dict[str, Any] | None:
    if schema_json is not None:
        return _load_json_argument(schema_json, "schema_json")
    if schema_key is None:
        return None
    try:
        return _registry.get(schema_key)
    except KeyError as exc:
        raise ToolError(str(exc)) from exc


def _run_analysis(
    text: str,
    schema: SchemaNode | dict[str, Any] | None,
    check_additional_properties: bool | None,
) -> AnalysisResult:
    try:
        return _analyzer.analyze(text, schema, check_additional_properties)
    except (DocumentTooLargeError, InvalidSchemaError) as exc:
        raise ToolError(str(exc)) from exc


def _failure_message(result: AnalysisResult) -> str:
    return result.failure.message if result.failure is not None else "unknown error"


def _violation_lines(result: AnalysisResult) -> list[str]:
    lines: list[str] = []
    if result.errors:
        lines.append(f"Schema errors ({len(result.errors)}):")
        for v in result.errors:
            line = result.line_for(v)
            where = f"  (line {line})" if line is not None else ""
            lines.append(f"  [{v.kind}] {v.message}{where}")
    if result.warnings:
        lines.append(f"Additional properties ({len(result.warnings)}):")
        for v in result.warnings:
            line = result.line_for(v)
            where = f"  (line {line})" if line is not None else ""
            lines.append(f"  {v.path.replace('/', ':')}{where}")
    return lines


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool
def analyze_json(
    text: str,
    schema_key: str | None = None,
    schema_json: str | None = None,
    check_additional_properties: bool | None = None,
) -> str:
    """Check whether text is valid JSON or JSON Lines, and optionally validate it.

    Reports the detected mode (single document or concatenated documents),
    the start line of each document, or the located parse error.  When a
    schema is given (a registered ``schema_key`` or inline ``schema_json``)
    every document is validated against it.

    Args:
        text: Raw JSON, JSON Lines, or concatenated pretty-printed JSON.
        schema_key: Key of a schema saved with ``save_schema``.
        schema_json: Inline schema as JSON text (takes precedence over the key).
        check_additional_properties: Also report keys the schema does not declare.
    """
    logger.info("analyze_json called (text length=%d)", len(text))
    logger.debug("analyze_json text:\n%s", text)
    schema = _resolve_schema(schema_key, schema_json)
    result = _run_analysis(text, schema, check_additional_properties)

    if result.status == AnalysisStatus.IDLE:
        return "Input is empty."
    if result.status == AnalysisStatus.ERROR:
        return f"Invalid JSON.\n{_failure_message(result)}"

    lines = [
        f"Valid JSON ({result.mode}): {len(result.documents)} document(s).",
        f"  start lines: {', '.join(str(n) for n in result.start_lines)}",
    ]
    if result.schema_checked:
        if not result.violations:
            lines.append("Schema validation passed.")
        lines.extend(_violation_lines(result))
    return "\n".join(lines)


@mcp.tool
def validate_json(
    text: str,
    schema_key: str | None = None,
    schema_json: str | None = None,
    check_additional_properties: bool | None = None,
) -> str:
    """Validate JSON or JSON Lines text against a schema.

    Each violation is listed with its path and, when known, its source line.

    Args:
        text: Raw JSON, JSON Lines, or concatenated pretty-printed JSON.
        schema_key: Key of a schema saved with ``save_schema``.
        schema_json: Inline schema as JSON text (takes precedence over the key).
        check_additional_properties: Also report keys the schema does not declare.
    """
    logger.info("validate_json called (text length=%d)", len(text))
    schema = _resolve_schema(schema_key, schema_json)
    if schema is None:
        raise ToolError("Either schema_key or schema_json is required")
    result = _run_analysis(text, schema, check_additional_properties)

    if result.status == AnalysisStatus.IDLE:
        raise ToolError("Input is empty")
    if result.status == AnalysisStatus.ERROR:
        raise ToolError(f"Invalid JSON.\n{_failure_message(result)}")
    if not result.violations:
        count = len(result.documents)
        if result.elements_validated:
            count = len(result.documents[0])
        return f"All {count} document(s) match the schema."
    return "\n".join(_violation_lines(result))


@mcp.tool
def format_json(text: str, style: str = "beautify") -> str:
    """Beautify (2-space indent) or minify JSON / JSON Lines text.

    Args:
        text: One or more JSON documents.
        style: ``beautify`` or ``minify``.
    """
    if style not in ("beautify", "minify"):
        raise ToolError(f"Unknown style '{style}'. Use 'beautify' or 'minify'.")
    formatter = beautify if style == "beautify" else minify
    try:
        return formatter(text)
    except StructuralParseError as exc:
        raise ToolError(f"Invalid JSON.\n{exc.failure.message}") from exc


@mcp.tool
def infer_json_schema(document_json: str, title: str = "Untitled Schema") -> str:
    """Infer a schema from an example JSON document.

    Objects get every key as required; arrays are described by their first item.

    Args:
        document_json: Example document as JSON text.
        title: Title for the generated schema.
    """
    data = _load_json_argument(document_json, "document_json")
    schema = schema_from_document(data, title) if isinstance(data, dict) else infer_schema(data)
    return json.dumps(schema, indent=2, ensure_ascii=False)


@mcp.tool
def save_schema(schema_json: str, name: str, key: str | None = None) -> str:
    """Register a schema (or an example object to infer one from).

    Args:
        schema_json: A schema, or a plain example object, as JSON text.
        name: Fallback title when the schema has none.
        key: Registry key; defaults to the camelCase form of the title.
    """
    data = _load_json_argument(schema_json, "schema_json")
    try:
        result = _registry.import_document(data, name, key=key)
    except InvalidSchemaError as exc:
        raise ToolError(str(exc)) from exc
    suffix = " (inferred from example data)" if result.inferred else ""
    return f"Schema saved.  key: {result.key}{suffix}"


@mcp.tool
def list_schemas() -> str:
    """List registered schemas with their titles and property counts."""
    summaries = _registry.summaries()
    if not summaries:
        return "No schemas registered."
    lines = ["Schemas:"]
    for s in summaries:
        title = f"  {s.title}" if s.title else ""
        lines.append(f"  {s.key}{title}  ({s.properties} properties)")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the MCP server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger.info(
        "jsonscope MCP Server v%s starting (transport=%s)",
        __version__,
        settings.mcp_transport,
    )

    global _registry, _analyzer  # noqa: PLW0603
    _registry = SchemaRegistry()
    if settings.schema_dir is not None:
        _registry.load_directory(settings.schema_dir)
    _analyzer = DocumentAnalyzer(
        max_document_size=settings.max_document_size,
        check_additional_properties=settings.check_additional_properties,
    )

    if settings.mcp_transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(
            transport=settings.mcp_transport,
            host=settings.mcp_server_host,
            port=settings.mcp_server_port,
            log_level=settings.log_level.lower(),
        )


if __name__ == "__main__":
    main()
