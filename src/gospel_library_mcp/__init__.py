"""Gospel Library MCP server with search routing."""

__version__ = "0.1.0"
