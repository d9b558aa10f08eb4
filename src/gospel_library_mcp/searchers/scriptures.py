"""Verse-level scripture searcher."""

from __future__ import annotations

from typing import Any

from gospel_library_mcp.models.search import SearchOutcome
from gospel_library_mcp.search.endpoints import EndpointId
from gospel_library_mcp.searchers.base import Searcher, items_outcome


class ScriptureSearcher(Searcher):
    """Searches scripture verses.

    Parameters: ``collection_name`` (e.g. "The Book of Mormon"), ``testament``
    ("Old Testament" or "New Testament", Bible only), ``start``.
    """

    endpoint_id = EndpointId.SCRIPTURE_VERSES

    async def search(
        self,
        query: str,
        params: dict[str, Any] | None = None,
        *,
        limit: int = 20,
    ) -> SearchOutcome:
        params = params or {}
        wire: dict[str, Any] = {
            "q": query,
            "start": int(params.get("start") or 0),
            "lang": params.get("lang") or self.lang,
        }
        if params.get("collection_name"):
            wire["collectionName"] = params["collection_name"]
        if params.get("testament"):
            wire["testament"] = params["testament"]

        data = await self._fetch("vertex-scripture-search", params=wire)
        return items_outcome(data, limit, snippet_keys=("snippet", "description", "text"))
