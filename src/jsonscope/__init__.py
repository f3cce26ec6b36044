"""jsonscope: location-aware JSON parsing and schema validation."""

__version__ = "0.3.0"
