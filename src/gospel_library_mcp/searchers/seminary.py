"""Seminary and institute manual searcher."""

from __future__ import annotations

import logging
import re
from typing import Any

from gospel_library_mcp.models.search import SearchOutcome, SearchResultItem
from gospel_library_mcp.search.endpoints import EndpointId
from gospel_library_mcp.searchers.base import (
    STANDARD_EXCLUSIONS,
    SearchTransportError,
    Searcher,
    parse_total,
)
from gospel_library_mcp.utils import clean_snippet, extract_uri

logger = logging.getLogger(__name__)

SUBJECT_TERMS = {
    "old-testament": '"Old Testament" Genesis Exodus Psalms Isaiah',
    "new-testament": '"New Testament" Matthew Mark Luke John Romans',
    "book-of-mormon": '"Book of Mormon" Nephi Alma Mosiah Helaman',
    "doctrine-and-covenants": '"Doctrine and Covenants" D&C revelation',
}

SUBJECT_PATHS = {
    "old-testament": ("*old-testament*", "*ot-*"),
    "new-testament": ("*new-testament*", "*nt-*"),
    "book-of-mormon": ("*book-of-mormon*", "*bofm*"),
    "doctrine-and-covenants": ("*doctrine-and-covenants*", "*dc-*", "*d-c-*"),
}

_MANUAL_PATHS = ("*seminary*", "*institute*", "*teacher-manual*", "*student-manual*")

_LESSON_IN_TITLE = re.compile(r"lesson\s*(\d+)", re.IGNORECASE)
_MANUAL_IN_LINK = re.compile(r"/manual/([^/?#]+)")


def enrich_query(query: str, lesson_number: int | None = None, subject: str | None = None) -> str:
    """Add seminary, lesson and subject terms to steer the search."""
    enriched = query
    lowered = query.lower()
    if "seminary" not in lowered and "institute" not in lowered:
        enriched = f"{enriched} seminary manual"
    if lesson_number:
        enriched = f'"lesson {lesson_number}" {enriched}'
    if subject:
        enriched = f"{enriched} {SUBJECT_TERMS.get(subject, subject.replace('-', ' '))}"
    return enriched


def seminary_filter(subject: str | None = None) -> str:
    paths = list(_MANUAL_PATHS)
    if subject:
        paths.extend(SUBJECT_PATHS.get(subject, ()))
    alternatives = " OR ".join(f'siteSearch:"{path}"' for path in paths)
    return f'siteSearch:"churchofjesuschrist.org/study/manual" AND ({alternatives}){STANDARD_EXCLUSIONS}'


def subject_from_link(link: str) -> str | None:
    lowered = link.lower()
    for subject, paths in SUBJECT_PATHS.items():
        if any(path.strip("*") in lowered for path in paths):
            return subject
    return None


def manual_type(link: str) -> str:
    lowered = link.lower()
    if "teacher" in lowered:
        return "teacher"
    if "student" in lowered:
        return "student"
    return "both"


def manual_name(link: str) -> str:
    match = _MANUAL_IN_LINK.search(link)
    if not match:
        return "Seminary Manual"
    return match.group(1).replace("-", " ").title()


def _string_value(fields: dict[str, Any], name: str) -> str | None:
    value = fields.get(name)
    if isinstance(value, dict):
        return value.get("stringValue")
    return None


def _first_snippet(fields: dict[str, Any]) -> str | None:
    snippets = fields.get("snippets") or {}
    values = (snippets.get("listValue") or {}).get("values") or []
    if values and isinstance(values[0], dict):
        return values[0].get("stringValue")
    return None


class SeminarySearcher(Searcher):
    """Searches seminary and institute manuals.

    Parameters: ``lesson_number``, ``subject`` (``old-testament``,
    ``new-testament``, ``book-of-mormon``, ``doctrine-and-covenants``), ``start``.
    """

    endpoint_id = EndpointId.SEMINARY

    async def search(
        self,
        query: str,
        params: dict[str, Any] | None = None,
        *,
        limit: int = 20,
    ) -> SearchOutcome:
        params = params or {}
        lesson_number = params.get("lesson_number")
        subject = params.get("subject")

        wire = {
            "q": enrich_query(query, lesson_number, subject),
            "start": int(params.get("start") or 1),
            "searchType": "web",
            "filter": seminary_filter(subject),
            "orderBy": "",
        }
        data = await self._fetch("vertex-search", params=wire)

        raw_results = data.get("results") or []
        if not isinstance(raw_results, list):
            raise SearchTransportError("results is not a list", "INVALID_RESPONSE")

        results = []
        for raw in raw_results[:limit]:
            item = self._parse_result(raw, subject)
            if item is not None:
                results.append(item)

        metadata: dict[str, Any] = {}
        if data.get("nextPageToken"):
            metadata["next_page_token"] = data["nextPageToken"]
        return SearchOutcome.found(results, total=parse_total(data), metadata=metadata)

    def _parse_result(self, raw: Any, subject: str | None) -> SearchResultItem | None:
        try:
            fields = raw["document"]["derivedStructData"]["fields"]
        except (KeyError, TypeError):
            logger.debug(f"Skipping seminary result without fields: {raw!r:.200}")
            return None

        link = _string_value(fields, "link")
        if not link:
            return None
        title = _string_value(fields, "title") or "Untitled"
        lesson = _LESSON_IN_TITLE.search(title)

        metadata: dict[str, Any] = {
            "manual": manual_name(link),
            "manual_type": manual_type(link),
        }
        if lesson:
            metadata["lesson_number"] = int(lesson.group(1))
        detected_subject = subject or subject_from_link(link)
        if detected_subject:
            metadata["subject"] = detected_subject
        display_link = _string_value(fields, "displayLink")
        if display_link:
            metadata["display_link"] = display_link

        return SearchResultItem(
            title=title,
            uri=extract_uri(link),
            link=link,
            snippet=clean_snippet(_first_snippet(fields)),
            metadata=metadata,
        )
