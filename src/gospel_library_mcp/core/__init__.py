"""Core infrastructure shared across the application.

This module is the single source of truth for:
- The HTTP provider instance
- The searcher registry (one searcher per endpoint id)
- Building the orchestrator from the runtime configuration
"""

from gospel_library_mcp.core.providers import (
    default_provider,
    get_provider,
)
from gospel_library_mcp.core.searchers import (
    build_searchers,
    default_searchers,
    get_orchestrator,
    get_searcher,
)

__all__ = [
    "default_provider",
    "get_provider",
    "build_searchers",
    "default_searchers",
    "get_orchestrator",
    "get_searcher",
]
