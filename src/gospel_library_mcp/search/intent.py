"""Intent resolution: pick the endpoint most likely to answer a query.

``resolve`` runs a fixed cascade of rules over a ``QueryAnalysis``. The first
rule that claims the query decides the primary endpoint, its parameters and
the ordered fallbacks to try when the primary comes back empty.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable

from gospel_library_mcp.search import patterns
from gospel_library_mcp.search.analyzer import (
    ContentType,
    QueryAnalysis,
    detect_manual_family,
    detect_media_type,
    normalize,
    resolve_year,
)
from gospel_library_mcp.search.endpoints import (
    MANUALS_SITE_FILTER,
    STRENGTH_OF_YOUTH_SITE_FILTER,
    EndpointId,
    build_params,
)

SCRIPTURE_CONFIDENCE = 0.9
SPEAKER_CONFIDENCE = 0.9
CONFERENCE_CONFIDENCE = 0.85
MANUAL_FAMILY_CONFIDENCE = 0.8
STRENGTH_OF_YOUTH_CONFIDENCE = 0.75
MANUAL_CONFIDENCE = 0.7
MEDIA_CONFIDENCE = 0.75
MAGAZINE_CONFIDENCE = 0.7
DEFAULT_CONFIDENCE = 0.6


@dataclass(frozen=True)
class SearchHints:
    """Optional caller hints that refine routing."""

    content_hint: ContentType | None = None


@dataclass(frozen=True)
class SearchIntent:
    """Routing decision for one query."""

    primary_endpoint: EndpointId
    confidence: float
    suggested_params: dict[str, Any] = field(default_factory=dict)
    fallback_endpoints: tuple[EndpointId, ...] = ()
    reasoning: str = ""


def apply_hints(analysis: QueryAnalysis, hints: SearchHints | None) -> QueryAnalysis:
    """Let a caller's content hint stand in when the analyzer found nothing."""
    if hints is None or hints.content_hint is None:
        return analysis
    if analysis.content_type not in (ContentType.UNKNOWN, ContentType.MIXED):
        return analysis
    return dataclasses.replace(analysis, content_type=ContentType(hints.content_hint))


def _intent(
    primary: EndpointId,
    confidence: float,
    params: dict[str, Any],
    fallbacks: tuple[EndpointId, ...],
    reasoning: str,
) -> SearchIntent:
    # Fallbacks keep their order, skip the primary and never repeat
    ordered: list[EndpointId] = []
    for endpoint in fallbacks:
        if endpoint != primary and endpoint not in ordered:
            ordered.append(endpoint)
    return SearchIntent(
        primary_endpoint=primary,
        confidence=confidence,
        suggested_params=params,
        fallback_endpoints=tuple(ordered),
        reasoning=reasoning,
    )


Rule = Callable[[str, str, QueryAnalysis, int], "SearchIntent | None"]


def _scripture_rule(query: str, text: str, analysis: QueryAnalysis, year: int) -> SearchIntent | None:
    # A full reference outranks a speaker; a bare book name does not
    claims = (
        analysis.content_type == ContentType.SCRIPTURE
        or analysis.has_scripture_references
        or (analysis.has_book_names and analysis.content_type != ContentType.CONFERENCE)
    )
    if not claims:
        return None
    return _intent(
        EndpointId.SCRIPTURE_VERSES,
        SCRIPTURE_CONFIDENCE,
        build_params(EndpointId.SCRIPTURE_VERSES, query, analysis, year),
        (EndpointId.ARCHIVE,),
        "Query contains scripture references, book names, or verse patterns",
    )


def _conference_rule(query: str, text: str, analysis: QueryAnalysis, year: int) -> SearchIntent | None:
    claims = (
        analysis.content_type == ContentType.CONFERENCE
        or analysis.has_speaker_terms
        or (analysis.has_date_terms and patterns.CONFERENCE_TERMS.matches(text))
    )
    if not claims:
        return None

    speaker = analysis.suggested_filters.speaker
    if speaker:
        return _intent(
            EndpointId.ARCHIVE,
            SPEAKER_CONFIDENCE,
            build_params(EndpointId.ARCHIVE, query, analysis, year),
            (EndpointId.CONFERENCE_TALKS, EndpointId.MULTI_TYPE),
            f"Query mentions {speaker}; searching the archive by author",
        )
    return _intent(
        EndpointId.CONFERENCE_TALKS,
        CONFERENCE_CONFIDENCE,
        build_params(EndpointId.CONFERENCE_TALKS, query, analysis, year),
        (EndpointId.ARCHIVE, EndpointId.MULTI_TYPE),
        "Query mentions conference terms or conference-related dates",
    )


def _manual_rule(query: str, text: str, analysis: QueryAnalysis, year: int) -> SearchIntent | None:
    claims = (
        analysis.content_type in (ContentType.MANUAL, ContentType.HANDBOOK)
        or patterns.MANUAL_TERMS.matches(text)
        or patterns.HANDBOOK_TERMS.matches(text)
    )
    if not claims:
        return None

    family = detect_manual_family(text)
    if family is None and (
        analysis.content_type == ContentType.HANDBOOK or patterns.HANDBOOK_TERMS.matches(text)
    ):
        family = "general-handbook"

    if family == "come-follow-me":
        return _intent(
            EndpointId.COME_FOLLOW_ME,
            MANUAL_FAMILY_CONFIDENCE,
            build_params(EndpointId.COME_FOLLOW_ME, query, analysis, year),
            (EndpointId.MULTI_TYPE, EndpointId.ARCHIVE),
            "Query specifically mentions Come, Follow Me content",
        )
    if family == "general-handbook":
        return _intent(
            EndpointId.GENERAL_HANDBOOK,
            MANUAL_FAMILY_CONFIDENCE,
            build_params(EndpointId.GENERAL_HANDBOOK, query, analysis, year),
            (EndpointId.MULTI_TYPE, EndpointId.ARCHIVE),
            "Query mentions the General Handbook or policy terms",
        )
    if family == "seminary":
        return _intent(
            EndpointId.SEMINARY,
            MANUAL_FAMILY_CONFIDENCE,
            build_params(EndpointId.SEMINARY, query, analysis, year),
            (EndpointId.MULTI_TYPE, EndpointId.ARCHIVE),
            "Query mentions seminary or institute manuals",
        )
    if family == "for-the-strength-of-youth":
        return _intent(
            EndpointId.MULTI_TYPE,
            STRENGTH_OF_YOUTH_CONFIDENCE,
            {"search_type": "web", "filter": STRENGTH_OF_YOUTH_SITE_FILTER},
            (EndpointId.ARCHIVE,),
            "Query mentions For the Strength of Youth",
        )
    return _intent(
        EndpointId.MULTI_TYPE,
        MANUAL_CONFIDENCE,
        {"search_type": "web", "filter": MANUALS_SITE_FILTER},
        (EndpointId.ARCHIVE,),
        "Query mentions manual or lesson content",
    )


def _media_rule(query: str, text: str, analysis: QueryAnalysis, year: int) -> SearchIntent | None:
    if analysis.content_type != ContentType.MEDIA and not patterns.MEDIA_TERMS.matches(text):
        return None
    media_type = detect_media_type(text)
    return _intent(
        EndpointId.MEDIA,
        MEDIA_CONFIDENCE,
        build_params(EndpointId.MEDIA, query, analysis, year),
        (EndpointId.ARCHIVE,),
        f"Query requests {media_type or 'media'} content",
    )


def _magazine_rule(query: str, text: str, analysis: QueryAnalysis, year: int) -> SearchIntent | None:
    if analysis.content_type != ContentType.MAGAZINE and not patterns.MAGAZINE_TERMS.matches(text):
        return None
    return _intent(
        EndpointId.MAGAZINES,
        MAGAZINE_CONFIDENCE,
        build_params(EndpointId.MAGAZINES, query, analysis, year),
        (EndpointId.ARCHIVE,),
        "Query mentions magazine names or magazine-related terms",
    )


def _default_rule(query: str, text: str, analysis: QueryAnalysis, year: int) -> SearchIntent:
    return _intent(
        EndpointId.ARCHIVE,
        DEFAULT_CONFIDENCE,
        build_params(EndpointId.ARCHIVE, query, analysis, year),
        (EndpointId.MULTI_TYPE,),
        "General query; using the comprehensive archive search",
    )


RULES: tuple[Rule, ...] = (
    _scripture_rule,
    _conference_rule,
    _manual_rule,
    _media_rule,
    _magazine_rule,
)


def resolve(
    query: str,
    analysis: QueryAnalysis,
    hints: SearchHints | None = None,
    *,
    current_year: int | None = None,
) -> SearchIntent:
    """Decide where to send a query.

    Args:
        query: Raw query text
        analysis: Result of ``analyze(query)``
        hints: Optional caller hints
        current_year: Year used to resolve relative dates (default: this year)

    Returns:
        SearchIntent with the primary endpoint, its parameters and fallbacks
    """
    year = resolve_year(current_year)
    analysis = apply_hints(analysis, hints)
    text = normalize(query)

    for rule in RULES:
        intent = rule(query, text, analysis, year)
        if intent is not None:
            return intent
    return _default_rule(query, text, analysis, year)
