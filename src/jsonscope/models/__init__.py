"""Pydantic data models shared by the parser, the schema engine and the surfaces."""

from jsonscope.models.document import (
    LocatedDocument,
    LocationEntry,
    MultiDocResult,
)
from jsonscope.models.errors import (
    LineColumn,
    ParseFailure,
    SchemaViolation,
    ViolationKind,
)
from jsonscope.models.schema import SchemaNode, SchemaType

__all__ = [
    "LineColumn",
    "LocatedDocument",
    "LocationEntry",
    "MultiDocResult",
    "ParseFailure",
    "SchemaNode",
    "SchemaType",
    "SchemaViolation",
    "ViolationKind",
]
