"""Business logic for the search and content tools."""

from __future__ import annotations

import logging
import re
from typing import Any

import requests
from bs4 import BeautifulSoup

from gospel_library_mcp.admin.service import get_config
from gospel_library_mcp.core.providers import get_provider
from gospel_library_mcp.core.searchers import get_orchestrator
from gospel_library_mcp.metrics import record_call
from gospel_library_mcp.models.content import (
    BrowseResponse,
    ContentResponse,
    Footnote,
    MediaItem,
    MediaResponse,
    StructureItem,
)
from gospel_library_mcp.models.search import ClassifiedSearchResponse, SearchOutcome
from gospel_library_mcp.search.endpoints import EndpointId, compact
from gospel_library_mcp.search.orchestrator import MAX_LIMIT, InvalidInputError
from gospel_library_mcp.utils import (
    extract_media,
    html_to_markdown,
    html_to_text,
    media_format,
    media_quality,
    validate_content_uri,
)

logger = logging.getLogger(__name__)

CONTENT_API_URL = "https://www.churchofjesuschrist.org/study/api/v3/language-pages/type/content"
DYNAMIC_API_URL = "https://www.churchofjesuschrist.org/study/api/v3/language-pages/type/dynamic"

MAX_BROWSE_DEPTH = 3
MAX_EXPANDED_CHILDREN = 10
STRUCTURE_TYPES = ("collection", "book", "chapter", "section", "session", "item")
EXPANDABLE_TYPES = ("collection", "book")

MEDIA_TYPES = ("all", "audio", "video", "image")
MEDIA_QUALITIES = ("all", "1080p", "720p", "360p")

# entry field -> structure metadata key
_STRUCTURE_META_FIELDS = {
    "speaker": "speaker",
    "date": "date",
    "imageUrl": "image_url",
    "position": "position",
}

# meta field -> metadata key
_CONTENT_META_FIELDS = {
    "contentType": "content_type",
    "publication": "publication",
    "publicationDate": "publication_date",
    "description": "description",
    "canonicalUrl": "canonical_url",
    "audioUrl": "audio_url",
    "videoUrl": "video_url",
    "imageUrl": "image_url",
}


class ContentFetchError(Exception):
    """The content API could not return a document."""

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.code = code


def _check_request(query: str, limit: int) -> None:
    if not query or not query.strip():
        raise InvalidInputError("Query must not be empty")
    if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= MAX_LIMIT:
        raise InvalidInputError(f"limit must be between 1 and {MAX_LIMIT}, got {limit!r}")


async def smart_search(
    query: str,
    search_mode: str = "smart",
    force_endpoint: str | None = None,
    content_hint: str | None = None,
    limit: int | None = None,
) -> ClassifiedSearchResponse:
    """Route a query with the shared orchestrator."""
    return await get_orchestrator().classify_and_search(
        query,
        search_mode=search_mode,
        force_endpoint=force_endpoint,
        content_hint=content_hint,
        limit=_resolve_limit(limit),
    )


def _resolve_limit(limit: int | None) -> int:
    return limit if limit is not None else get_config("default_limit", 20)


async def search_endpoint(
    endpoint: EndpointId,
    query: str,
    params: dict[str, Any] | None = None,
    limit: int | None = None,
) -> SearchOutcome:
    """Call one endpoint directly, bypassing routing.

    Raises:
        InvalidInputError: If the query is empty or the limit out of range
    """
    limit = _resolve_limit(limit)
    _check_request(query, limit)
    return await get_orchestrator().execute(endpoint, query, compact(params or {}), limit)


def _parse_footnotes(raw: Any) -> list[Footnote]:
    # The API returns either a list or a mapping keyed by footnote id
    if isinstance(raw, dict):
        raw = list(raw.values())
    if not isinstance(raw, list):
        return []

    footnotes = []
    for note in raw:
        if not isinstance(note, dict):
            continue
        content = note.get("noteContent") or note.get("text") or ""
        footnotes.append(
            Footnote(
                marker=str(note.get("noteMarker") or note.get("marker") or note.get("noteNumber") or ""),
                content=html_to_text(content) if "<" in content else content,
                references=[
                    {"href": ref.get("href", ""), "text": ref.get("text", "")}
                    for ref in note.get("noteRefs") or []
                    if isinstance(ref, dict)
                ],
            )
        )
    return footnotes


def _check_uri(uri: str) -> None:
    if not validate_content_uri(uri):
        raise InvalidInputError(
            "Invalid URI format. URI must start with / and contain only alphanumeric "
            "characters, hyphens, underscores, and slashes."
        )


async def _fetch_api(api_url: str, uri: str, language: str, tool: str) -> tuple[dict[str, Any], Any]:
    """Call a language-pages API and return (data, elapsed_ms).

    Failures are recorded against ``tool`` in the metrics.

    Raises:
        ContentFetchError: If the call fails or the body reports an error
    """
    try:
        result = await get_provider(api_url).fetch_json(api_url, params={"lang": language, "uri": uri})
    except requests.HTTPError as e:
        status = e.response.status_code if e.response is not None else None
        record_call(tool, success=False, error=str(e))
        raise ContentFetchError(f"HTTP error fetching {uri}: {e}", str(status or "FETCH_ERROR")) from e
    except ValueError as e:
        record_call(tool, success=False, error=str(e))
        raise ContentFetchError(f"Invalid response for {uri}: {e}", "INVALID_RESPONSE") from e
    except requests.RequestException as e:
        record_call(tool, success=False, error=str(e))
        raise ContentFetchError(f"Error fetching {uri}: {e}", "FETCH_ERROR") from e

    data = result.data if isinstance(result.data, dict) else {}
    if data.get("error"):
        error = data["error"] if isinstance(data["error"], dict) else {"message": str(data["error"])}
        record_call(tool, success=False, error=error.get("message"))
        raise ContentFetchError(error.get("message", "Unknown error"), str(error.get("code", "API_ERROR")))

    return data, result.metadata.get("elapsed_ms")


async def fetch_document(
    uri: str,
    lang: str | None = None,
    include_html: bool = False,
    as_markdown: bool = False,
) -> ContentResponse:
    """Fetch one document from the content API.

    Args:
        uri: Document URI, e.g. "/scriptures/bofm/alma/32"
        lang: Language code (default: configured language)
        include_html: Return the body as raw HTML
        as_markdown: Return the body as markdown instead of plain text

    Returns:
        ContentResponse

    Raises:
        InvalidInputError: If the URI is malformed
        ContentFetchError: If the API call fails or returns an error
    """
    _check_uri(uri)
    language = lang or get_config("default_lang", "eng")
    data, elapsed_ms = await _fetch_api(CONTENT_API_URL, uri, language, "fetch_content")

    meta = data.get("meta") or {}
    content = data.get("content") or {}
    body = content.get("body") or ""

    if include_html:
        text, body_format = body, "html"
    elif as_markdown:
        text, body_format = html_to_markdown(body, strip_tags=["script", "style"]), "markdown"
    else:
        text, body_format = html_to_text(body), "text"

    metadata = {key: meta[field] for field, key in _CONTENT_META_FIELDS.items() if meta.get(field)}
    metadata["lang"] = language
    metadata["elapsed_ms"] = elapsed_ms

    record_call("fetch_content", success=True, result_count=1, elapsed_ms=elapsed_ms)
    logger.debug(f"Fetched {uri} ({len(text)} chars as {body_format})")

    return ContentResponse(
        uri=uri,
        title=meta.get("title") or "Gospel Library Content",
        content=text,
        format=body_format,
        metadata=metadata,
        footnotes=_parse_footnotes(content.get("footnotes")),
    )


def _entry_type(entry: dict[str, Any], uri: str | None) -> str:
    declared = str(entry.get("type") or "").lower()
    if declared in STRUCTURE_TYPES:
        return declared
    if not uri:
        return "item"
    segments = uri.strip("/").split("/")
    # /general-conference/2024/10 is a conference, not a chapter
    if segments[0] == "general-conference":
        return "collection" if len(segments) <= 3 else "item"
    if segments[-1].isdigit():
        return "chapter"
    # /scriptures/bofm/alma is a book, /scriptures/bofm a collection
    if segments[0] == "scriptures":
        return {2: "collection", 3: "book"}.get(len(segments), "item")
    return "item"


def _plain(title: str | None) -> str:
    # Titles may carry markup such as <span class="dominant">
    if not title:
        return ""
    return html_to_text(title) if "<" in title else title.strip()


def _structure_item(entry: dict[str, Any]) -> StructureItem:
    uri = entry.get("uri") or None
    return StructureItem(
        title=_plain(entry.get("title")) or uri or "Untitled",
        uri=uri,
        type=_entry_type(entry, uri),
        description=entry.get("description") or entry.get("subtitle") or None,
        metadata={key: entry[field] for field, key in _STRUCTURE_META_FIELDS.items() if entry.get(field)},
    )


def _section_item(title: str | None, entries: list[Any]) -> StructureItem:
    title = _plain(title) or "Section"
    return StructureItem(
        title=title,
        type="session" if "session" in title.lower() else "section",
        children=_parse_entries(entries),
    )


def _parse_entries(entries: Any) -> list[StructureItem]:
    # toc entries wrap each node as {"content": {...}} or {"section": {...}}
    items: list[StructureItem] = []
    for entry in entries if isinstance(entries, list) else []:
        if not isinstance(entry, dict):
            continue
        if isinstance(entry.get("section"), dict):
            section = entry["section"]
            items.append(_section_item(section.get("title"), section.get("entries") or []))
        elif isinstance(entry.get("content"), dict):
            items.append(_structure_item(entry["content"]))
        elif entry.get("title") or entry.get("uri"):
            items.append(_structure_item(entry))
    return items


def parse_structure(data: dict[str, Any]) -> tuple[str | None, list[StructureItem]]:
    """Parse a dynamic API response into (title, items).

    Handles both collection pages (``collection.sections[].entries``) and
    tables of contents (``toc.entries``).
    """
    collection = data.get("collection")
    if isinstance(collection, dict):
        items = []
        for section in collection.get("sections") or []:
            if not isinstance(section, dict):
                continue
            if section.get("title"):
                items.append(_section_item(section["title"], section.get("entries") or []))
            else:
                items.extend(_parse_entries(section.get("entries")))
        return collection.get("title"), items

    toc = data.get("toc")
    if isinstance(toc, dict):
        return toc.get("title"), _parse_entries(toc.get("entries"))

    return None, []


def _expandable(items: list[StructureItem]) -> list[StructureItem]:
    found = []
    for item in items:
        if item.type in EXPANDABLE_TYPES and item.uri:
            found.append(item)
        elif item.type in ("section", "session"):
            found.extend(_expandable(item.children))
    return found


async def _expand(items: list[StructureItem], language: str, depth: int) -> None:
    if depth <= 1:
        return
    for item in _expandable(items)[:MAX_EXPANDED_CHILDREN]:
        try:
            data, _ = await _fetch_api(DYNAMIC_API_URL, item.uri, language, "browse_structure")
        except ContentFetchError as e:
            logger.warning(f"Skipping children of {item.uri}: {e}")
            continue
        _, item.children = parse_structure(data)
        await _expand(item.children, language, depth - 1)


async def browse_document(uri: str, lang: str | None = None, depth: int = 1) -> BrowseResponse:
    """List the structure under a URI: volumes, books, chapters or sessions.

    Args:
        uri: URI to browse, e.g. "/scriptures/bofm" or "/general-conference/2024/10"
        lang: Language code (default: configured language)
        depth: Levels to expand, 1-3. Below the first level at most ten
               collections or books per level are expanded.

    Returns:
        BrowseResponse

    Raises:
        InvalidInputError: If the URI is malformed or depth out of range
        ContentFetchError: If the top-level call fails
    """
    _check_uri(uri)
    if isinstance(depth, bool) or not isinstance(depth, int) or not 1 <= depth <= MAX_BROWSE_DEPTH:
        raise InvalidInputError(f"depth must be between 1 and {MAX_BROWSE_DEPTH}, got {depth!r}")
    language = lang or get_config("default_lang", "eng")

    data, elapsed_ms = await _fetch_api(DYNAMIC_API_URL, uri, language, "browse_structure")
    title, items = parse_structure(data)
    await _expand(items, language, depth)

    record_call("browse_structure", success=True, result_count=len(items), elapsed_ms=elapsed_ms)
    logger.debug(f"Browsed {uri}: {len(items)} items, depth {depth}")
    return BrowseResponse(uri=uri, title=title, depth=depth, items=items)


async def fetch_media_info(
    uri: str,
    lang: str | None = None,
    media_type: str = "all",
    quality: str = "all",
) -> MediaResponse:
    """Collect the audio, video and image files attached to a document.

    Args:
        uri: Document URI, e.g. "/general-conference/2024/10/57nelson"
        lang: Language code (default: configured language)
        media_type: "all", "audio", "video" or "image"
        quality: Video quality: "all", "1080p", "720p" or "360p"

    Returns:
        MediaResponse

    Raises:
        InvalidInputError: If the URI, media type or quality is invalid
        ContentFetchError: If the API call fails or returns an error
    """
    _check_uri(uri)
    if media_type not in MEDIA_TYPES:
        raise InvalidInputError(f"media_type must be one of {', '.join(MEDIA_TYPES)}, got {media_type!r}")
    if quality not in MEDIA_QUALITIES:
        raise InvalidInputError(f"quality must be one of {', '.join(MEDIA_QUALITIES)}, got {quality!r}")
    language = lang or get_config("default_lang", "eng")

    data, elapsed_ms = await _fetch_api(CONTENT_API_URL, uri, language, "fetch_media")
    meta = data.get("meta") or {}
    body = (data.get("content") or {}).get("body") or ""

    found: list[dict[str, Any]] = []
    for field, kind in (("audioUrl", "audio"), ("videoUrl", "video")):
        if meta.get(field):
            url = meta[field]
            found.append(
                {
                    "type": kind,
                    "url": url,
                    "format": media_format(url),
                    "quality": media_quality(url) if kind == "video" else None,
                }
            )
    known = {item["url"] for item in found}
    found.extend(item for item in extract_media(body) if item["url"] not in known)

    media = [MediaItem(language=language, **item) for item in found]
    available = sorted({item.type for item in media})
    if media_type != "all":
        media = [item for item in media if item.type == media_type]
    if quality != "all":
        media = [item for item in media if item.type != "video" or item.quality == quality]

    speaker = None
    author = BeautifulSoup(body, "lxml").select_one(".author-name") if body else None
    if author is not None:
        speaker = re.sub(r"^By\s+", "", author.get_text(" ", strip=True)) or None

    record_call("fetch_media", success=True, result_count=len(media), elapsed_ms=elapsed_ms)
    logger.debug(f"Found {len(media)} media files for {uri} ({media_type}, {quality})")

    return MediaResponse(
        uri=uri,
        title=meta.get("title") or "Gospel Library Content",
        speaker=speaker,
        date=meta.get("publicationDate"),
        description=meta.get("description"),
        thumbnail_url=meta.get("imageUrl"),
        media=media,
        available_types=available,
    )
