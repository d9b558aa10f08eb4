"""Main entry point for the Gospel Library MCP server."""

from __future__ import annotations

import logging
import os
import sys


def main() -> None:
    """Main entry point."""
    # stdout carries the stdio transport, so logs go to stderr
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    # Parse command line arguments
    transport = "stdio"
    host = "0.0.0.0"
    port = 8000

    if len(sys.argv) > 1:
        transport = sys.argv[1]
    if len(sys.argv) > 2:
        host = sys.argv[2]
    if len(sys.argv) > 3:
        port = int(sys.argv[3])

    from gospel_library_mcp.server import run_server

    if transport != "stdio":
        logging.getLogger(__name__).info(f"Listening on {host}:{port}")
    run_server(transport=transport, host=host, port=port)


if __name__ == "__main__":
    main()
