"""Service layer shared by the REST API and the MCP server."""
