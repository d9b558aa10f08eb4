"""Static vocabularies used to classify search queries.

Everything here is built once at import time and never mutated:
- Scripture books grouped by collection, with common abbreviations
- Ordered scripture-reference shapes (first match wins)
- Known conference speakers and their name variants
- Keyword sets for conference, manual, media, magazine and handbook content
- Date vocabulary (relative phrases and conference months)
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable

# Scripture collection names as accepted by the scripture search endpoint
BIBLE = "The Holy Bible"
BOOK_OF_MORMON = "The Book of Mormon"
DOCTRINE_AND_COVENANTS = "The Doctrine and Covenants"
PEARL_OF_GREAT_PRICE = "The Pearl of Great Price"

OLD_TESTAMENT = "Old Testament"
NEW_TESTAMENT = "New Testament"

# Lookarounds used instead of \b so that tokens like "d&c" match cleanly
_START = r"(?<![a-z0-9])"
_END = r"(?![a-z0-9])"


@dataclass(frozen=True)
class ScriptureBook:
    """A canonical scripture book (or collection phrase) and where it lives."""

    name: str
    collection: str
    testament: str | None = None


@dataclass(frozen=True)
class ScriptureReference:
    """A parsed reference such as ``Alma 32:21``."""

    book: ScriptureBook
    chapter: int
    verse: int | None = None


@dataclass(frozen=True)
class Speaker:
    """A known conference speaker."""

    name: str
    honorifics: tuple[str, ...] = ("elder", "president")
    last_name_alone: bool = True

    def variants(self) -> tuple[str, ...]:
        """Lowercase name variants with periods removed."""
        full = self.name.lower().replace(".", "")
        parts = full.split()
        names = {full, f"{parts[0]} {parts[-1]}"}
        names.update(f"{title} {parts[-1]}" for title in self.honorifics)
        if self.last_name_alone:
            names.add(parts[-1])
        return tuple(sorted(names))


class TermMatcher:
    """Whole-word, case-insensitive matcher over a fixed set of terms.

    Longer terms are tried first so "general handbook" wins over "handbook".
    """

    def __init__(self, terms: Iterable[str]) -> None:
        self.terms = tuple(sorted({t.lower() for t in terms}, key=len, reverse=True))
        alternation = "|".join(re.escape(term) for term in self.terms)
        self._pattern = re.compile(f"{_START}(?:{alternation}){_END}")

    def search(self, text: str) -> str | None:
        """Return the first (leftmost) matching term, or None."""
        match = self._pattern.search(text.lower())
        return match.group(0) if match else None

    def matches(self, text: str) -> bool:
        return self.search(text) is not None


def _books(collection: str, names: Iterable[str], testament: str | None = None) -> dict[str, ScriptureBook]:
    return {name.lower(): ScriptureBook(name, collection, testament) for name in names}


OLD_TESTAMENT_BOOKS = _books(
    BIBLE,
    [
        "Genesis", "Exodus", "Leviticus", "Numbers", "Deuteronomy", "Joshua",
        "Judges", "Ruth", "1 Samuel", "2 Samuel", "1 Kings", "2 Kings",
        "1 Chronicles", "2 Chronicles", "Ezra", "Nehemiah", "Esther", "Job",
        "Psalms", "Proverbs", "Ecclesiastes", "Song of Solomon", "Isaiah",
        "Jeremiah", "Lamentations", "Ezekiel", "Daniel", "Hosea", "Joel",
        "Amos", "Obadiah", "Jonah", "Micah", "Nahum", "Habakkuk", "Zephaniah",
        "Haggai", "Zechariah", "Malachi",
    ],
    OLD_TESTAMENT,
)

NEW_TESTAMENT_BOOKS = _books(
    BIBLE,
    [
        "Matthew", "Mark", "Luke", "John", "Acts", "Romans", "1 Corinthians",
        "2 Corinthians", "Galatians", "Ephesians", "Philippians", "Colossians",
        "1 Thessalonians", "2 Thessalonians", "1 Timothy", "2 Timothy", "Titus",
        "Philemon", "Hebrews", "James", "1 Peter", "2 Peter", "1 John",
        "2 John", "3 John", "Jude", "Revelation",
    ],
    NEW_TESTAMENT,
)

BOOK_OF_MORMON_BOOKS = _books(
    BOOK_OF_MORMON,
    [
        "1 Nephi", "2 Nephi", "Jacob", "Enos", "Jarom", "Omni",
        "Words of Mormon", "Mosiah", "Alma", "Helaman", "3 Nephi", "4 Nephi",
        "Mormon", "Ether", "Moroni",
    ],
)

DOCTRINE_AND_COVENANTS_BOOKS = _books(DOCTRINE_AND_COVENANTS, ["Doctrine and Covenants"])

PEARL_OF_GREAT_PRICE_BOOKS = _books(
    PEARL_OF_GREAT_PRICE,
    [
        "Moses", "Abraham", "Joseph Smith-Matthew", "Joseph Smith-History",
        "Articles of Faith",
    ],
)

CANONICAL_BOOKS: dict[str, ScriptureBook] = {
    **OLD_TESTAMENT_BOOKS,
    **NEW_TESTAMENT_BOOKS,
    **BOOK_OF_MORMON_BOOKS,
    **DOCTRINE_AND_COVENANTS_BOOKS,
    **PEARL_OF_GREAT_PRICE_BOOKS,
}

# Abbreviations and alternate spellings -> canonical key
_ABBREVIATIONS = {
    "psalm": "psalms",
    "song of songs": "song of solomon",
    "revelations": "revelation",
    "matt": "matthew",
    "rom": "romans",
    "heb": "hebrews",
    "deut": "deuteronomy",
    "isa": "isaiah",
    "1 cor": "1 corinthians",
    "2 cor": "2 corinthians",
    "1 ne": "1 nephi",
    "2 ne": "2 nephi",
    "3 ne": "3 nephi",
    "4 ne": "4 nephi",
    "w of m": "words of mormon",
    "hel": "helaman",
    "morm": "mormon",
    "moro": "moroni",
    "d&c": "doctrine and covenants",
    "abr": "abraham",
    "js-m": "joseph smith-matthew",
    "js-h": "joseph smith-history",
    "joseph smith matthew": "joseph smith-matthew",
    "joseph smith history": "joseph smith-history",
    "a of f": "articles of faith",
}

# Collection-level phrases count as book names for classification
COLLECTION_PHRASES: dict[str, ScriptureBook] = {
    "bible": ScriptureBook("Bible", BIBLE),
    "holy bible": ScriptureBook("Bible", BIBLE),
    "old testament": ScriptureBook(OLD_TESTAMENT, BIBLE, OLD_TESTAMENT),
    "new testament": ScriptureBook(NEW_TESTAMENT, BIBLE, NEW_TESTAMENT),
    "book of mormon": ScriptureBook("Book of Mormon", BOOK_OF_MORMON),
    "nephi": ScriptureBook("Nephi", BOOK_OF_MORMON),
    "pearl of great price": ScriptureBook("Pearl of Great Price", PEARL_OF_GREAT_PRICE),
}

BOOK_ALIASES: dict[str, ScriptureBook] = {
    **CANONICAL_BOOKS,
    **{alias: CANONICAL_BOOKS[key] for alias, key in _ABBREVIATIONS.items()},
    **COLLECTION_PHRASES,
}

BOOK_NAMES = TermMatcher(BOOK_ALIASES)


def find_book(text: str) -> ScriptureBook | None:
    """Return the leftmost book or collection phrase named in the text."""
    term = BOOK_NAMES.search(text)
    return BOOK_ALIASES[term] if term else None


# Reference shapes, evaluated in order. Each extractor gets the match and
# returns a reference, or None to let the next shape try.
_REFERENCE_BOOKS = "|".join(
    re.escape(alias)
    for alias in sorted(set(CANONICAL_BOOKS) | set(_ABBREVIATIONS), key=len, reverse=True)
)
_NUMBERED_NAMES = "nephi|ne|samuel|kings|chronicles|corinthians|cor|thessalonians|timothy|peter|john"


def _doctrine_and_covenants(match: re.Match[str]) -> ScriptureReference | None:
    verse = match.group(2)
    return ScriptureReference(
        CANONICAL_BOOKS["doctrine and covenants"],
        int(match.group(1)),
        int(verse) if verse else None,
    )


def _numbered_book(match: re.Match[str]) -> ScriptureReference | None:
    key = f"{match.group(1)} {match.group(2)}"
    book = CANONICAL_BOOKS.get(_ABBREVIATIONS.get(key, key))
    if book is None:
        return None
    verse = match.group(4)
    return ScriptureReference(book, int(match.group(3)), int(verse) if verse else None)


def _book_chapter(match: re.Match[str]) -> ScriptureReference | None:
    key = match.group(1)
    book = CANONICAL_BOOKS[_ABBREVIATIONS.get(key, key)]
    groups = match.groups()
    verse = groups[2] if len(groups) > 2 else None
    return ScriptureReference(book, int(match.group(2)), int(verse) if verse else None)


REFERENCE_SHAPES: tuple[tuple[re.Pattern[str], Callable[[re.Match[str]], ScriptureReference | None]], ...] = (
    (
        re.compile(rf"{_START}(?:d&c|doctrine and covenants)\s+(\d{{1,3}})(?::(\d{{1,3}}))?(?!\d)"),
        _doctrine_and_covenants,
    ),
    (
        re.compile(rf"{_START}([1-4])\s+({_NUMBERED_NAMES})\s+(\d{{1,3}})(?::(\d{{1,3}}))?(?!\d)"),
        _numbered_book,
    ),
    (
        re.compile(rf"{_START}({_REFERENCE_BOOKS})\s+(\d{{1,3}}):(\d{{1,3}})(?!\d)"),
        _book_chapter,
    ),
    (
        re.compile(rf"{_START}({_REFERENCE_BOOKS})\s+(\d{{1,3}})(?![\d:])"),
        _book_chapter,
    ),
)


def find_scripture_reference(text: str) -> ScriptureReference | None:
    """Return the first reference found by the ordered shape list."""
    lowered = text.lower()
    for pattern, extract in REFERENCE_SHAPES:
        for match in pattern.finditer(lowered):
            reference = extract(match)
            if reference is not None:
                return reference
    return None


SPEAKERS: tuple[Speaker, ...] = (
    Speaker("Russell M. Nelson"),
    Speaker("Dallin H. Oaks"),
    Speaker("Henry B. Eyring"),
    Speaker("Jeffrey R. Holland", last_name_alone=False),
    Speaker("Dieter F. Uchtdorf"),
    Speaker("David A. Bednar"),
    Speaker("Quentin L. Cook", last_name_alone=False),
    Speaker("D. Todd Christofferson"),
    Speaker("Neil L. Andersen"),
    Speaker("Ronald A. Rasband"),
    Speaker("Gary E. Stevenson"),
    Speaker("Dale G. Renlund"),
    Speaker("Gerrit W. Gong", last_name_alone=False),
    Speaker("Ulisses Soares"),
    Speaker("Patrick Kearon"),
    Speaker("M. Russell Ballard"),
    Speaker("Gordon B. Hinckley"),
    Speaker("Thomas S. Monson"),
    Speaker("Boyd K. Packer", last_name_alone=False),
    Speaker("Jean B. Bingham", honorifics=("sister", "president")),
    Speaker("Camille N. Johnson", honorifics=("sister", "president"), last_name_alone=False),
    Speaker("Emily Belle Freeman", honorifics=("sister", "president"), last_name_alone=False),
)

SPEAKER_VARIANTS: dict[str, Speaker] = {}
for _speaker in SPEAKERS:
    for _variant in _speaker.variants():
        SPEAKER_VARIANTS.setdefault(_variant, _speaker)

SPEAKER_NAMES = TermMatcher(SPEAKER_VARIANTS)

CONFERENCE_TERMS = TermMatcher(
    ["general conference", "conference", "talk", "talks", "sermon", "discourse"]
)

MANUAL_TERMS = TermMatcher(
    [
        "come follow me", "come, follow me", "general handbook",
        "for the strength of youth", "handbook", "lesson", "lessons", "manual",
        "manuals", "curriculum", "teaching", "study guide", "seminary",
        "institute",
    ]
)

# Manual families with a dedicated endpoint, in priority order
MANUAL_FAMILIES: tuple[tuple[str, TermMatcher], ...] = (
    ("come-follow-me", TermMatcher(["come follow me", "come, follow me", "cfm"])),
    ("general-handbook", TermMatcher(["general handbook", "handbook"])),
    ("seminary", TermMatcher(["seminary", "institute"])),
    ("for-the-strength-of-youth", TermMatcher(["for the strength of youth", "ftsoy"])),
)

# Media subtypes in priority order
MEDIA_TYPES: tuple[tuple[str, TermMatcher], ...] = (
    ("video", TermMatcher(["video", "videos", "film"])),
    ("music", TermMatcher(["audio", "music", "hymn", "hymns", "song", "songs"])),
    ("image", TermMatcher(["image", "images", "picture", "pictures", "photo", "photos"])),
    ("pdf", TermMatcher(["pdf"])),
)

MEDIA_TERMS = TermMatcher(term for _, matcher in MEDIA_TYPES for term in matcher.terms)

MAGAZINE_TERMS = TermMatcher(
    ["liahona", "ensign", "friend", "new era", "magazine", "magazines", "article", "articles"]
)

HANDBOOK_TERMS = TermMatcher(["handbook", "policy", "policies", "procedure", "procedures"])

RELATIVE_DATE_TERMS = TermMatcher(["recent", "latest", "current", "this year", "last year"])

CONFERENCE_MONTHS = TermMatcher(["april", "october"])

# First General Conference with a searchable online archive
EARLIEST_YEAR = 1971

# "1990s" is a decade, not a year
YEAR_PATTERN = re.compile(r"(?<!\d)(\d{4})(?!\d|s\b)")

DECADE_PATTERN = re.compile(r"(?<!\d)(19[7-9]0|20[0-9]0)s\b")

# Decades the archive offers as preset date ranges ("1990-1999")
ARCHIVE_DECADES = (1970, 1980, 1990, 2000, 2010)

LESSON_PATTERN = re.compile(r"\blesson\s+(\d{1,3})\b", re.IGNORECASE)
