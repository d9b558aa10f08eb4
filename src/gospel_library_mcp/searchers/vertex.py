"""Multi-type (vertex-search) searchers and their site-scoped variants."""

from __future__ import annotations

from typing import Any

from gospel_library_mcp.models.search import SearchOutcome
from gospel_library_mcp.search.endpoints import EndpointId
from gospel_library_mcp.searchers.base import Searcher, parse_items, parse_total, spelling_metadata

SEARCH_TYPES = ("web", "image", "video", "music", "pdf")

# Item fields worth keeping per search type, as (wire name, metadata key)
_MEDIA_FIELDS = {
    "video": (("duration", "duration"), ("videoUrl", "video_url")),
    "music": (("composer", "composer"), ("audioUrl", "audio_url")),
    "image": (("imageUrl", "image_url"), ("thumbnailUrl", "thumbnail_url")),
    "pdf": (("pdfUrl", "pdf_url"), ("pageCount", "page_count")),
}

COME_FOLLOW_ME_SITE_FILTER = 'siteSearch:"churchofjesuschrist.org/study/manual/come-follow-me*"'
GENERAL_HANDBOOK_SITE_FILTER = 'siteSearch:"churchofjesuschrist.org/study/manual/general-handbook*"'


class VertexSearcher(Searcher):
    """Searches web pages, images, video, music and PDFs.

    Parameters: ``search_type`` (one of ``SEARCH_TYPES``), ``filter``
    (``siteSearch`` expression), ``order_by``, ``start`` (1-based).
    """

    endpoint_id = EndpointId.MULTI_TYPE
    site_filter: str | None = None

    async def search(
        self,
        query: str,
        params: dict[str, Any] | None = None,
        *,
        limit: int = 20,
    ) -> SearchOutcome:
        params = params or {}
        search_type = params.get("search_type") or "web"
        if search_type not in SEARCH_TYPES:
            search_type = "web"

        wire: dict[str, Any] = {
            "q": query,
            "start": int(params.get("start") or 1),
            "searchType": search_type,
            "lang": params.get("lang") or self.lang,
        }
        site_filter = self.site_filter or params.get("filter")
        if site_filter:
            wire["filter"] = site_filter
        if params.get("order_by"):
            wire["orderBy"] = params["order_by"]

        data = await self._fetch("vertex-search", params=wire)
        results = parse_items(data, limit, snippet_keys=("htmlSnippet", "snippet", "description"))

        fields = _MEDIA_FIELDS.get(search_type, ())
        if fields:
            raw_items = [item for item in data.get("items") or [] if isinstance(item, dict)]
            by_link = {item.get("link") or item.get("url"): item for item in raw_items}
            for result in results:
                raw = by_link.get(result.link, {})
                for wire_name, key in fields:
                    if raw.get(wire_name):
                        result.metadata[key] = raw[wire_name]

        metadata = spelling_metadata(data)
        metadata["search_type"] = search_type
        return SearchOutcome.found(results, total=parse_total(data), metadata=metadata)


class MediaSearcher(VertexSearcher):
    """Media-only view of the multi-type search."""

    endpoint_id = EndpointId.MEDIA


class ComeFollowMeSearcher(VertexSearcher):
    """Come, Follow Me study materials."""

    endpoint_id = EndpointId.COME_FOLLOW_ME
    site_filter = COME_FOLLOW_ME_SITE_FILTER


class GeneralHandbookSearcher(VertexSearcher):
    """General Handbook policies and procedures."""

    endpoint_id = EndpointId.GENERAL_HANDBOOK
    site_filter = GENERAL_HANDBOOK_SITE_FILTER
