"""MCP search and content tools.

This module provides the functionality exposed as MCP tools:
- search_gospel_library: routed search with fallbacks
- search_general_conference, search_scriptures, search_archive,
  search_vertex, search_come_follow_me, search_general_handbook,
  search_seminary: direct endpoint searches
- fetch_content: document retrieval by URI
- browse_structure, fetch_media: collection structure and media files

The tools module follows a router -> service pattern:
- router.py: MCP tool definitions and registration
- service.py: Business logic for searching and fetching
"""

from gospel_library_mcp.tools.router import (
    browse_structure,
    fetch_content,
    fetch_media,
    register_content_tools,
    register_search_tools,
    search_archive,
    search_come_follow_me,
    search_general_conference,
    search_general_handbook,
    search_gospel_library,
    search_scriptures,
    search_seminary,
    search_vertex,
)
from gospel_library_mcp.tools.service import (
    ContentFetchError,
    browse_document,
    fetch_document,
    fetch_media_info,
    search_endpoint,
    smart_search,
)

__all__ = [
    # MCP tool functions
    "search_gospel_library",
    "search_general_conference",
    "search_scriptures",
    "search_archive",
    "search_vertex",
    "search_come_follow_me",
    "search_general_handbook",
    "search_seminary",
    "fetch_content",
    "browse_structure",
    "fetch_media",
    # Registration functions
    "register_search_tools",
    "register_content_tools",
    # Service functions
    "smart_search",
    "search_endpoint",
    "fetch_document",
    "browse_document",
    "fetch_media_info",
    "ContentFetchError",
]
