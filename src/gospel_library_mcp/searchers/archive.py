"""Archive (content-search-service) searchers."""

from __future__ import annotations

import logging
from typing import Any

from gospel_library_mcp.models.search import SearchOutcome
from gospel_library_mcp.search.endpoints import ArchiveSource, EndpointId
from gospel_library_mcp.searchers.base import Searcher, items_outcome

logger = logging.getLogger(__name__)

# Parameter name -> wire name
_WIRE_NAMES = {
    "source": "source",
    "author": "author",
    "date_range": "dateRange",
    "begin_date": "beginDate",
    "end_date": "endDate",
    "sort": "sort",
    "book": "book",
}


class ArchiveSearcher(Searcher):
    """Searches every collection through the archive, with optional filters.

    Parameters: ``source`` (``ArchiveSource`` id), ``author`` (speaker slug),
    ``date_range`` (``past-12-months``, ``1990-1999``, ``custom-date-range``...),
    ``begin_date``/``end_date`` (YYYY-MM-DD), ``sort``, ``book``, ``page``.
    """

    endpoint_id = EndpointId.ARCHIVE
    fixed_params: dict[str, Any] = {}
    default_params: dict[str, Any] = {}

    async def search(
        self,
        query: str,
        params: dict[str, Any] | None = None,
        *,
        limit: int = 20,
    ) -> SearchOutcome:
        merged = {**self.default_params, **(params or {}), **self.fixed_params}
        wire: dict[str, Any] = {
            "query": query,
            "page": int(merged.get("page") or 1),
            "lang": merged.get("lang") or self.lang,
        }
        for name, wire_name in _WIRE_NAMES.items():
            value = merged.get(name)
            if value not in (None, ""):
                wire[wire_name] = value

        data = await self._fetch("content-search-service", params=wire)
        outcome = items_outcome(data, limit)
        logger.debug(
            f"{self.endpoint_id.value}: {len(outcome.results)} of {outcome.total} results for {query!r}"
        )
        return outcome


class MagazineArchiveSearcher(ArchiveSearcher):
    """Church magazines (Liahona, Friend, For the Strength of Youth...)."""

    endpoint_id = EndpointId.MAGAZINES
    fixed_params = {"source": int(ArchiveSource.MAGAZINES)}


class ScriptureArchiveSearcher(ArchiveSearcher):
    """Scriptures in book order, optionally restricted to one ``ArchiveBook``."""

    endpoint_id = EndpointId.SCRIPTURES_ARCHIVE
    fixed_params = {"source": int(ArchiveSource.SCRIPTURES)}
    default_params = {"sort": "book"}
