"""Provider initialization for the Gospel Library MCP server."""

from gospel_library_mcp.admin.service import get_config
from gospel_library_mcp.providers import ContentProvider, RequestsProvider

# Initialize default provider
# This is shared by the searchers and the content tools
default_provider: ContentProvider = RequestsProvider(timeout=get_config("default_timeout", 30))


def get_provider(url: str) -> ContentProvider:
    """Get the appropriate provider for a URL.

    Args:
        url: The URL to call

    Returns:
        A provider that supports the URL

    Raises:
        ValueError: If no provider supports the URL
    """
    if default_provider.supports_url(url):
        return default_provider

    raise ValueError(f"No provider supports URL: {url}")
