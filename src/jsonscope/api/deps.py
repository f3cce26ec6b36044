"""Dependency injection for FastAPI: SchemaRegistry and DocumentAnalyzer singletons."""

from __future__ import annotations

from jsonscope.schema.registry import SchemaRegistry
from jsonscope.service.analyzer import DocumentAnalyzer

_schema_registry: SchemaRegistry | None = None
_analyzer: DocumentAnalyzer | None = None


def init_services(registry: SchemaRegistry, analyzer: DocumentAnalyzer) -> None:
    """Set the global registry and analyzer (called at app startup)."""
    global _schema_registry, _analyzer  # noqa: PLW0603
    _schema_registry = registry
    _analyzer = analyzer


def get_schema_registry() -> SchemaRegistry:
    """FastAPI ``Depends`` provider for SchemaRegistry."""
    if _schema_registry is None:
        raise RuntimeError("SchemaRegistry not initialised; call init_services() first")
    return _schema_registry


def get_analyzer() -> DocumentAnalyzer:
    """FastAPI ``Depends`` provider for DocumentAnalyzer."""
    if _analyzer is None:
        raise RuntimeError("DocumentAnalyzer not initialised; call init_services() first")
    return _analyzer


def reset_services() -> None:
    """Clear the global services (for tests)."""
    global _schema_registry, _analyzer  # noqa: PLW0603
    _schema_registry = None
    _analyzer = None
