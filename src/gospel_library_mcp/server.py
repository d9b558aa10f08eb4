"""Gospel Library MCP server: search routing and content tools."""

from __future__ import annotations

import logging

from mcp.server.fastmcp import FastMCP

from gospel_library_mcp.admin.router import (
    api_config_get,
    api_config_update,
    api_stats,
    health_check,
)
from gospel_library_mcp.tools.router import register_content_tools, register_search_tools

logger = logging.getLogger(__name__)

mcp = FastMCP("Gospel Library MCP", stateless_http=True)

register_search_tools(mcp)
register_content_tools(mcp)

mcp.custom_route("/healthz", methods=["GET"])(health_check)
mcp.custom_route("/api/stats", methods=["GET"])(api_stats)
mcp.custom_route("/api/config", methods=["GET"])(api_config_get)
mcp.custom_route("/api/config", methods=["POST"])(api_config_update)


def run_server(transport: str = "stdio", host: str = "0.0.0.0", port: int = 8000) -> None:
    """Run the MCP server.

    Args:
        transport: stdio, sse or streamable-http
        host: Host to bind to (HTTP transports only)
        port: Port to bind to (HTTP transports only)
    """
    mcp.settings.host = host
    mcp.settings.port = port
    logger.info(f"Starting Gospel Library MCP server ({transport})")
    mcp.run(transport=transport)
