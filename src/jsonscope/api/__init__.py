"""REST API for document analysis and schema management."""
