"""Query analysis for search routing.

``analyze`` turns a raw query into a ``QueryAnalysis``: which kind of content
the query is after, and which signals (quotes, dates, speakers, scripture
references, book names) it carries. The helpers below extract the concrete
values (speaker, year range, archive date filter, collection...) that the
intent resolver and the endpoint parameter builders need.

All functions are pure. Anything that depends on the current year takes it as
an argument; ``current_year=None`` falls back to today's date.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from gospel_library_mcp.search import patterns


class ContentType(str, Enum):
    """Coarse kind of content a query is looking for."""

    CONFERENCE = "conference"
    SCRIPTURE = "scripture"
    MANUAL = "manual"
    MAGAZINE = "magazine"
    MEDIA = "media"
    HANDBOOK = "handbook"
    MIXED = "mixed"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class SuggestedFilters:
    """Best-effort filter hints. Consumers must re-validate them."""

    year: int | None = None
    speaker: str | None = None


@dataclass(frozen=True)
class QueryAnalysis:
    """Signals detected in a single query."""

    content_type: ContentType
    has_quotes: bool
    has_date_terms: bool
    has_speaker_terms: bool
    has_scripture_references: bool
    has_book_names: bool
    suggested_filters: SuggestedFilters = field(default_factory=SuggestedFilters)


def resolve_year(current_year: int | None) -> int:
    return current_year if current_year is not None else date.today().year


def normalize(query: str) -> str:
    """Lowercase and collapse whitespace."""
    return " ".join(query.lower().split())


def _speaker_text(text: str) -> str:
    # "Russell M. Nelson" and "Russell M Nelson" match the same variant
    return " ".join(text.replace(".", " ").split())


def analyze(query: str, current_year: int | None = None) -> QueryAnalysis:
    """Analyze a query.

    Args:
        query: Raw query text (may be empty)
        current_year: Upper bound for year detection (default: this year)

    Returns:
        QueryAnalysis describing the query
    """
    year = resolve_year(current_year)
    text = normalize(query)

    speaker = detect_speaker(text)
    reference = patterns.find_scripture_reference(text)
    detected_year = detect_year(text, year)

    return QueryAnalysis(
        content_type=detect_content_type(text),
        has_quotes='"' in query,
        has_date_terms=(
            detected_year is not None
            or patterns.RELATIVE_DATE_TERMS.matches(text)
            or patterns.CONFERENCE_MONTHS.matches(text)
        ),
        has_speaker_terms=speaker is not None,
        has_scripture_references=reference is not None,
        has_book_names=patterns.BOOK_NAMES.matches(text),
        suggested_filters=SuggestedFilters(
            year=detected_year,
            speaker=speaker.name if speaker else None,
        ),
    )


def detect_content_type(text: str) -> ContentType:
    """Classify normalized query text. First matching rule wins.

    Speakers are checked before scripture: a talk can quote scripture
    without being about it.
    """
    if detect_speaker(text) is not None:
        return ContentType.CONFERENCE
    if patterns.CONFERENCE_TERMS.matches(text):
        return ContentType.CONFERENCE
    if patterns.BOOK_NAMES.matches(text) or patterns.find_scripture_reference(text):
        return ContentType.SCRIPTURE
    if patterns.MANUAL_TERMS.matches(text):
        return ContentType.MANUAL
    if patterns.MEDIA_TERMS.matches(text):
        return ContentType.MEDIA
    if patterns.MAGAZINE_TERMS.matches(text):
        return ContentType.MAGAZINE
    if patterns.HANDBOOK_TERMS.matches(text):
        return ContentType.HANDBOOK
    return ContentType.UNKNOWN


def detect_speaker(text: str) -> patterns.Speaker | None:
    variant = patterns.SPEAKER_NAMES.search(_speaker_text(text))
    return patterns.SPEAKER_VARIANTS[variant] if variant else None


def author_slug(name: str) -> str:
    """Convert a speaker name to the archive's author slug.

    >>> author_slug("Russell M. Nelson")
    'russell-m-nelson'
    """
    slug = name.lower().replace(".", "")
    return re.sub(r"\s+", "-", slug.strip())


def detect_year(text: str, current_year: int | None = None) -> int | None:
    """Return the first 4-digit year in [1971, current_year]."""
    upper = resolve_year(current_year)
    for match in patterns.YEAR_PATTERN.finditer(text):
        year = int(match.group(1))
        if patterns.EARLIEST_YEAR <= year <= upper:
            return year
    return None


def detect_year_range(text: str, current_year: int | None = None) -> tuple[int, int] | None:
    """Infer a conference year range from an explicit year or relative phrase."""
    year = resolve_year(current_year)
    explicit = detect_year(text, year)
    if explicit is not None:
        return explicit, explicit
    if re.search(r"\b(recent|latest|current)\b", text):
        return year - 2, year
    if "last year" in text:
        return year - 1, year - 1
    if "this year" in text:
        return year, year
    return None


def detect_archive_dates(text: str, current_year: int | None = None) -> dict[str, str]:
    """Infer the archive endpoint's date filter.

    Returns:
        Archive parameters: ``date_range`` and, for an explicit year,
        ``begin_date``/``end_date``. Empty when nothing was detected.
    """
    year = detect_year(text, current_year)
    if year is not None:
        return {
            "date_range": "custom-date-range",
            "begin_date": f"{year}-01-01",
            "end_date": f"{year}-12-31",
        }

    decade = patterns.DECADE_PATTERN.search(text)
    if decade:
        start = int(decade.group(1))
        if start in patterns.ARCHIVE_DECADES:
            return {"date_range": f"{start}-{start + 9}"}
        this_year = resolve_year(current_year)
        if start <= this_year:
            # No preset yet for a decade still in progress
            return {
                "date_range": "custom-date-range",
                "begin_date": f"{start}-01-01",
                "end_date": f"{min(start + 9, this_year)}-12-31",
            }

    if re.search(r"\bpast (10|ten) years\b", text):
        return {"date_range": "past-10-years"}
    if re.search(r"\bpast (5|five) years\b", text):
        return {"date_range": "past-5-years"}
    if re.search(r"\b(last|previous) conference\b", text):
        return {"date_range": "past-6-months"}
    if re.search(r"\b(recent|latest|current)\b|\b(last|past|this) year\b", text):
        return {"date_range": "past-12-months"}
    return {}


def detect_collection(text: str) -> tuple[str | None, str | None]:
    """Guess the scripture collection and testament.

    A parsed reference wins over a bare book name.

    Returns:
        Tuple of (collection name, testament); either may be None
    """
    reference = patterns.find_scripture_reference(text)
    book = reference.book if reference else patterns.find_book(text)
    if book is None:
        return None, None
    return book.collection, book.testament


def detect_manual_family(text: str) -> str | None:
    for family, matcher in patterns.MANUAL_FAMILIES:
        if matcher.matches(text):
            return family
    return None


def detect_media_type(text: str) -> str | None:
    for media_type, matcher in patterns.MEDIA_TYPES:
        if matcher.matches(text):
            return media_type
    return None


def detect_lesson_number(text: str) -> int | None:
    match = patterns.LESSON_PATTERN.search(text)
    if match:
        number = int(match.group(1))
        if 1 <= number <= 200:
            return number
    return None


_SEMINARY_SUBJECTS = {
    (patterns.BIBLE, patterns.OLD_TESTAMENT): "old-testament",
    (patterns.BIBLE, patterns.NEW_TESTAMENT): "new-testament",
    (patterns.BOOK_OF_MORMON, None): "book-of-mormon",
    (patterns.DOCTRINE_AND_COVENANTS, None): "doctrine-and-covenants",
}


def detect_seminary_subject(text: str) -> str | None:
    return _SEMINARY_SUBJECTS.get(detect_collection(text))
