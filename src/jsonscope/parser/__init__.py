"""JSON parsing with line fidelity: single documents, concatenated documents, failures."""

from jsonscope.parser.decoding import strict_loads
from jsonscope.parser.locator import (
    ROOT_PATH,
    UID_SEPARATOR,
    build_document_line_maps,
    build_path_line_map,
    parse_with_locations,
)
from jsonscope.parser.positions import map_offset_to_line_column
from jsonscope.parser.recovery import (
    StructuralParseError,
    describe_decode_error,
    explain_decode_failure,
)
from jsonscope.parser.scanner import parse_multi_document

__all__ = [
    "ROOT_PATH",
    "UID_SEPARATOR",
    "StructuralParseError",
    "build_document_line_maps",
    "build_path_line_map",
    "describe_decode_error",
    "explain_decode_failure",
    "map_offset_to_line_column",
    "parse_multi_document",
    "parse_with_locations",
    "strict_loads",
]
