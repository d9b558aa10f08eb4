"""Catalogue of search endpoints and their parameter schemas.

Each endpoint takes a different parameter bag, so parameters for a fallback
endpoint are rebuilt from the query analysis by ``build_params`` instead of
reusing another endpoint's parameters.
"""

from __future__ import annotations

from enum import Enum, IntEnum
from typing import Any, Callable

from gospel_library_mcp.search import patterns
from gospel_library_mcp.search.analyzer import (
    ContentType,
    QueryAnalysis,
    author_slug,
    detect_archive_dates,
    detect_collection,
    detect_lesson_number,
    detect_media_type,
    detect_seminary_subject,
    detect_year_range,
    normalize,
)


class EndpointId(str, Enum):
    """Search endpoints the router can send a query to."""

    CONFERENCE_TALKS = "search_general_conference"
    SCRIPTURE_VERSES = "search_scriptures"
    ARCHIVE = "search_archive"
    MULTI_TYPE = "search_vertex"
    MEDIA = "search_media"
    COME_FOLLOW_ME = "search_come_follow_me"
    GENERAL_HANDBOOK = "search_general_handbook"
    SEMINARY = "search_seminary"
    MAGAZINES = "search_magazines_archive"
    SCRIPTURES_ARCHIVE = "search_scriptures_archive"


# Short names accepted for forced-endpoint searches
ENDPOINT_ALIASES: dict[str, EndpointId] = {
    "conference": EndpointId.CONFERENCE_TALKS,
    "scriptures": EndpointId.SCRIPTURE_VERSES,
    "archive": EndpointId.ARCHIVE,
    "vertex": EndpointId.MULTI_TYPE,
    "media": EndpointId.MEDIA,
    "come-follow-me": EndpointId.COME_FOLLOW_ME,
    "handbook": EndpointId.GENERAL_HANDBOOK,
    "seminary": EndpointId.SEMINARY,
    "magazines": EndpointId.MAGAZINES,
}


def parse_endpoint(value: str) -> EndpointId | None:
    """Resolve an alias or full endpoint id. Returns None if unknown."""
    key = value.strip().lower()
    if key in ENDPOINT_ALIASES:
        return ENDPOINT_ALIASES[key]
    try:
        return EndpointId(key)
    except ValueError:
        return None


class ArchiveSource(IntEnum):
    """Source-category ids understood by the archive endpoint."""

    CALLINGS = 43
    MEDIA = 44
    OTHER = 45
    MAGAZINES = 46
    GENERAL_CONFERENCE = 47
    SCRIPTURES = 48
    HYMNS = 60


class ArchiveBook(IntEnum):
    """Scripture book filter ids used with ``ArchiveSource.SCRIPTURES``."""

    BOOK_OF_MORMON = 73
    DOCTRINE_AND_COVENANTS = 74
    NEW_TESTAMENT = 75
    OLD_TESTAMENT = 76
    PEARL_OF_GREAT_PRICE = 77


CONTENT_TYPE_SOURCES: dict[ContentType, ArchiveSource] = {
    ContentType.CONFERENCE: ArchiveSource.GENERAL_CONFERENCE,
    ContentType.SCRIPTURE: ArchiveSource.SCRIPTURES,
    ContentType.MAGAZINE: ArchiveSource.MAGAZINES,
    ContentType.MEDIA: ArchiveSource.MEDIA,
    ContentType.HANDBOOK: ArchiveSource.CALLINGS,
    ContentType.MANUAL: ArchiveSource.OTHER,
}

_ARCHIVE_BOOKS = {
    (patterns.BOOK_OF_MORMON, None): ArchiveBook.BOOK_OF_MORMON,
    (patterns.DOCTRINE_AND_COVENANTS, None): ArchiveBook.DOCTRINE_AND_COVENANTS,
    (patterns.BIBLE, patterns.NEW_TESTAMENT): ArchiveBook.NEW_TESTAMENT,
    (patterns.BIBLE, patterns.OLD_TESTAMENT): ArchiveBook.OLD_TESTAMENT,
    (patterns.PEARL_OF_GREAT_PRICE, None): ArchiveBook.PEARL_OF_GREAT_PRICE,
}

MANUALS_SITE_FILTER = 'siteSearch:"churchofjesuschrist.org/study/manual*"'
STRENGTH_OF_YOUTH_SITE_FILTER = (
    'siteSearch:"churchofjesuschrist.org/study/manual/for-the-strength-of-youth*"'
)

ParamBuilder = Callable[[str, QueryAnalysis, int], dict[str, Any]]


def compact(params: dict[str, Any]) -> dict[str, Any]:
    """Drop parameters that carry no value."""
    return {key: value for key, value in params.items() if value is not None}


def archive_source(content_type: ContentType) -> int | None:
    source = CONTENT_TYPE_SOURCES.get(content_type)
    return int(source) if source is not None else None


def _archive_params(text: str, analysis: QueryAnalysis, current_year: int) -> dict[str, Any]:
    params: dict[str, Any] = {"source": archive_source(analysis.content_type)}
    speaker = analysis.suggested_filters.speaker
    if speaker:
        params["source"] = int(ArchiveSource.GENERAL_CONFERENCE)
        params["author"] = author_slug(speaker)
    dates = detect_archive_dates(text, current_year)
    if not dates and params["source"] == ArchiveSource.GENERAL_CONFERENCE:
        dates = {"date_range": "past-12-months"}
    params.update(dates)
    return params


def _conference_params(text: str, analysis: QueryAnalysis, current_year: int) -> dict[str, Any]:
    params: dict[str, Any] = {"speaker": analysis.suggested_filters.speaker}
    years = detect_year_range(text, current_year)
    if years is not None:
        params.update(start_year=years[0], end_year=years[1])
    return params


def _scripture_params(text: str, analysis: QueryAnalysis, current_year: int) -> dict[str, Any]:
    collection, testament = detect_collection(text)
    return {"collection_name": collection, "testament": testament}


def _multi_type_params(text: str, analysis: QueryAnalysis, current_year: int) -> dict[str, Any]:
    return {"search_type": "web"}


def _media_params(text: str, analysis: QueryAnalysis, current_year: int) -> dict[str, Any]:
    return {"search_type": detect_media_type(text) or "web"}


def _site_scoped_params(text: str, analysis: QueryAnalysis, current_year: int) -> dict[str, Any]:
    # Come, Follow Me and the General Handbook carry their own site filter
    return {}


def _seminary_params(text: str, analysis: QueryAnalysis, current_year: int) -> dict[str, Any]:
    return {
        "lesson_number": detect_lesson_number(text),
        "subject": detect_seminary_subject(text),
    }


def _magazine_params(text: str, analysis: QueryAnalysis, current_year: int) -> dict[str, Any]:
    return detect_archive_dates(text, current_year)


def _scriptures_archive_params(text: str, analysis: QueryAnalysis, current_year: int) -> dict[str, Any]:
    book = _ARCHIVE_BOOKS.get(detect_collection(text))
    return {"book": int(book) if book is not None else None}


_PARAM_BUILDERS: dict[EndpointId, ParamBuilder] = {
    EndpointId.CONFERENCE_TALKS: _conference_params,
    EndpointId.SCRIPTURE_VERSES: _scripture_params,
    EndpointId.ARCHIVE: _archive_params,
    EndpointId.MULTI_TYPE: _multi_type_params,
    EndpointId.MEDIA: _media_params,
    EndpointId.COME_FOLLOW_ME: _site_scoped_params,
    EndpointId.GENERAL_HANDBOOK: _site_scoped_params,
    EndpointId.SEMINARY: _seminary_params,
    EndpointId.MAGAZINES: _magazine_params,
    EndpointId.SCRIPTURES_ARCHIVE: _scriptures_archive_params,
}

_missing = set(EndpointId) - set(_PARAM_BUILDERS)
if _missing:
    raise RuntimeError(f"No parameter builder for endpoints: {sorted(e.value for e in _missing)}")


def build_params(
    endpoint: EndpointId,
    query: str,
    analysis: QueryAnalysis,
    current_year: int,
) -> dict[str, Any]:
    """Build the parameter bag for ``endpoint`` from a query and its analysis.

    Args:
        endpoint: Endpoint the parameters are for
        query: Raw query text
        analysis: Analysis of the query
        current_year: Year used to resolve relative dates

    Returns:
        Endpoint-specific parameters with empty values removed
    """
    return compact(_PARAM_BUILDERS[endpoint](normalize(query), analysis, current_year))
