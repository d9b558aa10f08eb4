"""MCP tool definitions for Gospel Library search and content."""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from gospel_library_mcp.models.content import BrowseResponse, ContentResponse, MediaResponse
from gospel_library_mcp.models.search import ClassifiedSearchResponse, SearchOutcome
from gospel_library_mcp.search.endpoints import EndpointId
from gospel_library_mcp.tools.service import (
    browse_document,
    fetch_document,
    fetch_media_info,
    search_endpoint,
    smart_search,
)


async def search_gospel_library(
    query: str,
    search_mode: str = "smart",
    force_endpoint: str | None = None,
    content_hint: str | None = None,
    limit: int | None = None,
) -> ClassifiedSearchResponse:
    """Search the Gospel Library, routing the query to the best endpoint.

    The query is analyzed for speakers, scripture references, manuals, media
    and magazines, sent to the most specific endpoint, and retried on
    fallback endpoints when nothing is found.

    Args:
        query: Free-text query (e.g. "Russell M. Nelson faith", "Alma 32:21")
        search_mode: "smart" (primary then fallbacks), "comprehensive"
                     (several endpoints at once) or "specific" (force_endpoint only)
        force_endpoint: Endpoint for specific mode: conference, scriptures,
                        archive, vertex, come-follow-me, handbook, seminary,
                        media, magazines, or a full endpoint id
        content_hint: Content type to assume when the query has no clue
                      (conference, scripture, manual, magazine, media, handbook)
        limit: Maximum results per endpoint, 1-100 (default: configured default_limit)

    Returns:
        ClassifiedSearchResponse with results grouped by endpoint
    """
    return await smart_search(query, search_mode, force_endpoint, content_hint, limit)


async def search_general_conference(
    query: str,
    start_year: int | None = None,
    end_year: int | None = None,
    speaker: str | None = None,
    order_by: str | None = None,
    start: int = 0,
    limit: int | None = None,
) -> SearchOutcome:
    """Search General Conference talks (April and October sessions).

    Args:
        query: Search query; quote phrases for exact matches
        start_year: First year to search (default: ten years ago)
        end_year: Last year to search (default: this year)
        speaker: Speaker name (e.g. "Russell M. Nelson")
        order_by: "relevance" or "date"
        start: Starting index for pagination (0-based)
        limit: Maximum number of results (default: configured default_limit)

    Returns:
        SearchOutcome with matching talks
    """
    return await search_endpoint(
        EndpointId.CONFERENCE_TALKS,
        query,
        {
            "start_year": start_year,
            "end_year": end_year,
            "speaker": speaker,
            "order_by": order_by,
            "start": start,
        },
        limit,
    )


async def search_scriptures(
    query: str,
    collection_name: str | None = None,
    testament: str | None = None,
    start: int = 0,
    limit: int | None = None,
) -> SearchOutcome:
    """Verse-level search within the scriptures.

    Args:
        query: Search query for scripture verses
        collection_name: "The Holy Bible", "The Book of Mormon",
                         "The Doctrine and Covenants" or "The Pearl of Great Price"
        testament: "Old Testament" or "New Testament" (Bible only)
        start: Starting index for pagination (0-based)
        limit: Maximum number of results (default: configured default_limit)

    Returns:
        SearchOutcome with matching verses
    """
    return await search_endpoint(
        EndpointId.SCRIPTURE_VERSES,
        query,
        {"collection_name": collection_name, "testament": testament, "start": start},
        limit,
    )


async def search_archive(
    query: str,
    source: int | None = None,
    author: str | None = None,
    date_range: str | None = None,
    begin_date: str | None = None,
    end_date: str | None = None,
    sort: str | None = None,
    book: int | None = None,
    page: int = 1,
    limit: int | None = None,
) -> SearchOutcome:
    """Search across all Gospel Library collections with filters.

    Args:
        query: Search query
        source: 47=General Conference, 48=Scriptures, 46=Magazines, 44=Media,
                60=Hymns, 43=Callings, 45=Other
        author: Speaker/author slug (e.g. "russell-m-nelson")
        date_range: any-date, past-6-months, past-12-months, past-5-years,
                    past-10-years, 2010-2019 ... 1970-1979, or custom-date-range
        begin_date: Start date (YYYY-MM-DD) for custom-date-range
        end_date: End date (YYYY-MM-DD) for custom-date-range
        sort: "book" (scriptures) or "relevance"
        book: With source=48: 73=Book of Mormon, 74=D&C, 75=New Testament,
              76=Old Testament, 77=Pearl of Great Price
        page: Page number (1-based)
        limit: Maximum number of results (default: configured default_limit)

    Returns:
        SearchOutcome with matching documents
    """
    return await search_endpoint(
        EndpointId.ARCHIVE,
        query,
        {
            "source": source,
            "author": author,
            "date_range": date_range,
            "begin_date": begin_date,
            "end_date": end_date,
            "sort": sort,
            "book": book,
            "page": page,
        },
        limit,
    )


async def search_vertex(
    query: str,
    search_type: str = "web",
    filter: str | None = None,
    order_by: str | None = None,
    start: int = 1,
    limit: int | None = None,
) -> SearchOutcome:
    """Multi-type search over web pages, images, video, music and PDFs.

    Args:
        query: Search query
        search_type: "web", "image", "video", "music" or "pdf"
        filter: siteSearch filter expression
        order_by: "relevance" or "date"
        start: Starting index for pagination (1-based)
        limit: Maximum number of results (default: configured default_limit)

    Returns:
        SearchOutcome with matching items
    """
    return await search_endpoint(
        EndpointId.MULTI_TYPE,
        query,
        {"search_type": search_type, "filter": filter, "order_by": order_by, "start": start},
        limit,
    )


async def search_come_follow_me(query: str, start: int = 1, limit: int | None = None) -> SearchOutcome:
    """Search Come, Follow Me study materials.

    Args:
        query: Search query
        start: Starting index for pagination (1-based)
        limit: Maximum number of results (default: configured default_limit)
    """
    return await search_endpoint(EndpointId.COME_FOLLOW_ME, query, {"start": start}, limit)


async def search_general_handbook(query: str, start: int = 1, limit: int | None = None) -> SearchOutcome:
    """Search General Handbook policies and procedures.

    Args:
        query: Search query
        start: Starting index for pagination (1-based)
        limit: Maximum number of results (default: configured default_limit)
    """
    return await search_endpoint(EndpointId.GENERAL_HANDBOOK, query, {"start": start}, limit)


async def search_seminary(
    query: str,
    lesson_number: int | None = None,
    subject: str | None = None,
    start: int = 1,
    limit: int | None = None,
) -> SearchOutcome:
    """Search seminary and institute manuals.

    Args:
        query: Search query
        lesson_number: Lesson number to target
        subject: "old-testament", "new-testament", "book-of-mormon" or
                 "doctrine-and-covenants"
        start: Starting index for pagination (1-based)
        limit: Maximum number of results (default: configured default_limit)
    """
    return await search_endpoint(
        EndpointId.SEMINARY,
        query,
        {"lesson_number": lesson_number, "subject": subject, "start": start},
        limit,
    )


async def fetch_content(
    uri: str,
    lang: str | None = None,
    include_html: bool = False,
    as_markdown: bool = False,
) -> ContentResponse:
    """Fetch a Gospel Library document by URI.

    Args:
        uri: Document URI (e.g. "/scriptures/bofm/1-ne/1",
             "/general-conference/2025/04/13holland"); search results carry it
        lang: Language code (default: eng)
        include_html: Return the body as raw HTML (default: False)
        as_markdown: Return the body as markdown instead of plain text (default: False)

    Returns:
        ContentResponse with title, metadata, body and footnotes
    """
    return await fetch_document(uri, lang, include_html, as_markdown)


async def browse_structure(uri: str, lang: str | None = None, depth: int = 1) -> BrowseResponse:
    """Browse the structure of a Gospel Library collection.

    Args:
        uri: URI to browse (e.g. "/scriptures/bofm", "/general-conference/2024/10")
        lang: Language code (default: eng)
        depth: Levels to expand, 1-3 (default: 1)

    Returns:
        BrowseResponse with nested books, chapters, sessions or talks
    """
    return await browse_document(uri, lang, depth)


async def fetch_media(
    uri: str,
    lang: str | None = None,
    media_type: str = "all",
    quality: str = "all",
) -> MediaResponse:
    """List the audio, video and image files of a talk or chapter.

    Args:
        uri: Document URI (e.g. "/general-conference/2024/10/57nelson")
        lang: Language code (default: eng)
        media_type: "all", "audio", "video" or "image" (default: all)
        quality: Video quality: "all", "1080p", "720p" or "360p" (default: all)

    Returns:
        MediaResponse with speaker, date, thumbnail and media files
    """
    return await fetch_media_info(uri, lang, media_type, quality)


def register_search_tools(mcp: FastMCP) -> None:
    """Register the routed search and per-endpoint search tools.

    Args:
        mcp: FastMCP server instance to register tools on
    """
    mcp.tool()(search_gospel_library)
    mcp.tool()(search_general_conference)
    mcp.tool()(search_scriptures)
    mcp.tool()(search_archive)
    mcp.tool()(search_vertex)
    mcp.tool()(search_come_follow_me)
    mcp.tool()(search_general_handbook)
    mcp.tool()(search_seminary)


def register_content_tools(mcp: FastMCP) -> None:
    """Register the document fetch, browse and media tools.

    Args:
        mcp: FastMCP server instance to register tools on
    """
    mcp.tool()(fetch_content)
    mcp.tool()(browse_structure)
    mcp.tool()(fetch_media)
