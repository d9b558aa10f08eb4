"""HTTP providers for the Gospel Library APIs."""

from gospel_library_mcp.providers.base import ContentProvider, FetchResult
from gospel_library_mcp.providers.requests_provider import RequestsProvider

__all__ = ["ContentProvider", "FetchResult", "RequestsProvider"]
