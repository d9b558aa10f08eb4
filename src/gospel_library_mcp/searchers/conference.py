"""General Conference talk searcher."""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any

from gospel_library_mcp.models.search import SearchOutcome
from gospel_library_mcp.search.endpoints import EndpointId
from gospel_library_mcp.search.patterns import EARLIEST_YEAR
from gospel_library_mcp.searchers.base import STANDARD_EXCLUSIONS, Searcher, items_outcome

logger = logging.getLogger(__name__)

# Years searched when no range is given
DEFAULT_YEAR_SPAN = 10

CONFERENCE_MONTHS = ("04", "10")


def speaker_path_slug(speaker: str) -> str:
    """Talk URLs end in a speaker slug: 'Russell M. Nelson' -> 'russell-m-nelson'."""
    slug = re.sub(r"\s+", "-", speaker.strip().lower())
    return re.sub(r"[^a-z0-9\-]", "", slug)


def conference_filter(start_year: int, end_year: int, speaker: str | None = None) -> str:
    """Build the site filter for April and October sessions of the given years."""
    paths = [
        f'siteSearch:"churchofjesuschrist.org/study/general-conference/{year}/{month}/"'
        for year in range(start_year, end_year + 1)
        for month in CONFERENCE_MONTHS
    ]
    expression = f"({' OR '.join(paths)}){STANDARD_EXCLUSIONS}"
    if speaker:
        expression += f' AND siteSearch:"*/{speaker_path_slug(speaker)}"'
    return expression


class ConferenceSearcher(Searcher):
    """Searches General Conference talks by year range.

    Parameters: ``start_year``, ``end_year`` (default: the last ten years),
    ``speaker``, ``order_by`` (``relevance`` or ``date``), ``start``.
    """

    endpoint_id = EndpointId.CONFERENCE_TALKS

    async def search(
        self,
        query: str,
        params: dict[str, Any] | None = None,
        *,
        limit: int = 20,
    ) -> SearchOutcome:
        params = params or {}
        current_year = date.today().year
        end_year = int(params.get("end_year") or current_year)
        start_year = int(params.get("start_year") or end_year - DEFAULT_YEAR_SPAN)
        start_year = max(EARLIEST_YEAR, min(start_year, end_year))
        if end_year < EARLIEST_YEAR:
            logger.debug(f"{self.endpoint_id.value}: no conferences before {EARLIEST_YEAR}")
            return SearchOutcome.empty(metadata={"start_year": start_year, "end_year": end_year})

        payload = {
            "query": query,
            "start": int(params.get("start") or 0),
            "filter": conference_filter(start_year, end_year, params.get("speaker")),
            "orderBy": params.get("order_by") or "",
            "sort": "",
        }
        data = await self._fetch("general-conference-search", payload=payload)
        outcome = items_outcome(data, limit)
        outcome.metadata.update({"start_year": start_year, "end_year": end_year})
        logger.debug(
            f"{self.endpoint_id.value}: {len(outcome.results)} results for {query!r} "
            f"({start_year}-{end_year})"
        )
        return outcome
