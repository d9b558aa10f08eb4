"""Pydantic data models for searches and fetched content.

This module defines the data structures returned by the MCP tools:
- Endpoint outcomes (SearchOutcome, SearchResultItem)
- Routed searches (ClassifiedSearchResponse, SourceResult, EndpointAttempt)
- Fetched documents (ContentResponse, Footnote)
- Structure and media (BrowseResponse, StructureItem, MediaResponse, MediaItem)
"""

from gospel_library_mcp.models.content import (
    BrowseResponse,
    ContentResponse,
    Footnote,
    MediaItem,
    MediaResponse,
    StructureItem,
)
from gospel_library_mcp.models.search import (
    ClassifiedSearchResponse,
    EndpointAttempt,
    SearchOutcome,
    SearchResultItem,
    SourceResult,
)

__all__ = [
    # Search models
    "SearchResultItem",
    "SearchOutcome",
    "SourceResult",
    "EndpointAttempt",
    "ClassifiedSearchResponse",
    # Content models
    "ContentResponse",
    "Footnote",
    "BrowseResponse",
    "StructureItem",
    "MediaResponse",
    "MediaItem",
]
