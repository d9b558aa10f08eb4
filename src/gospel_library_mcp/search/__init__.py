"""Search intelligence: query analysis, intent resolution and endpoint routing.

The orchestrator lives in ``gospel_library_mcp.search.orchestrator`` and is
imported from there; this package only exposes the pure routing functions.
"""

from gospel_library_mcp.search.analyzer import (
    ContentType,
    QueryAnalysis,
    SuggestedFilters,
    analyze,
)
from gospel_library_mcp.search.endpoints import EndpointId, build_params, parse_endpoint
from gospel_library_mcp.search.intent import SearchHints, SearchIntent, resolve

__all__ = [
    "ContentType",
    "QueryAnalysis",
    "SuggestedFilters",
    "analyze",
    "EndpointId",
    "build_params",
    "parse_endpoint",
    "SearchHints",
    "SearchIntent",
    "resolve",
]
