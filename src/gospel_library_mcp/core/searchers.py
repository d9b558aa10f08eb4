"""Searcher registry and the shared orchestrator."""

from __future__ import annotations

from gospel_library_mcp.admin.service import get_config
from gospel_library_mcp.core.providers import default_provider
from gospel_library_mcp.providers import ContentProvider
from gospel_library_mcp.search.endpoints import EndpointId
from gospel_library_mcp.search.orchestrator import SearchOrchestrator
from gospel_library_mcp.searchers import SEARCHER_CLASSES, Searcher


def build_searchers(provider: ContentProvider, lang: str = "eng") -> dict[EndpointId, Searcher]:
    """Create one searcher per endpoint id.

    Raises:
        RuntimeError: If an endpoint id has no searcher
    """
    searchers = {cls.endpoint_id: cls(provider, lang=lang) for cls in SEARCHER_CLASSES}
    missing = set(EndpointId) - set(searchers)
    if missing:
        raise RuntimeError(f"No searcher for endpoints: {sorted(e.value for e in missing)}")
    return searchers


default_searchers: dict[EndpointId, Searcher] = build_searchers(
    default_provider, lang=get_config("default_lang", "eng")
)


def get_searcher(endpoint: EndpointId) -> Searcher:
    return default_searchers[endpoint]


def get_orchestrator() -> SearchOrchestrator:
    """Build an orchestrator over the shared searchers with the current config."""
    for searcher in default_searchers.values():
        searcher.lang = get_config("default_lang", "eng")
    return SearchOrchestrator(
        default_searchers,
        call_timeout=get_config("call_timeout", 30.0),
        comprehensive_fanout=get_config("comprehensive_fanout", 2),
    )
