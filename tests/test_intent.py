"""Tests for intent resolution and endpoint parameter building."""

from __future__ import annotations

import pytest

from gospel_library_mcp.search import patterns
from gospel_library_mcp.search.analyzer import ContentType, analyze
from gospel_library_mcp.search.endpoints import (
    MANUALS_SITE_FILTER,
    STRENGTH_OF_YOUTH_SITE_FILTER,
    ArchiveSource,
    EndpointId,
    build_params,
    parse_endpoint,
)
from gospel_library_mcp.search.intent import SearchHints, apply_hints, resolve


def route(query: str, year: int = 2025, hints: SearchHints | None = None):
    return resolve(query, analyze(query, current_year=year), hints, current_year=year)


class TestResolveScenarios:
    """End-to-end routing decisions for representative queries."""

    def test_speaker_routes_to_archive_by_author(self) -> None:
        """A known speaker goes to the archive filtered by author."""
        intent = route("Russell M. Nelson faith")
        assert intent.primary_endpoint == EndpointId.ARCHIVE
        assert intent.confidence == 0.9
        assert intent.suggested_params["author"] == "russell-m-nelson"
        assert intent.suggested_params["source"] == ArchiveSource.GENERAL_CONFERENCE
        assert intent.suggested_params["date_range"] == "past-12-months"
        assert intent.fallback_endpoints == (EndpointId.CONFERENCE_TALKS, EndpointId.MULTI_TYPE)

    def test_honorific_speaker_uses_canonical_slug(self) -> None:
        """"President Nelson" resolves to the full-name slug."""
        intent = route("President Nelson on covenants")
        assert intent.suggested_params["author"] == "russell-m-nelson"

    def test_speaker_with_year(self) -> None:
        """An explicit year becomes a custom archive date range."""
        params = route("Elder Bednar 2019").suggested_params
        assert params["date_range"] == "custom-date-range"
        assert params["begin_date"] == "2019-01-01"
        assert params["end_date"] == "2019-12-31"

    def test_verse_reference_routes_to_scripture_search(self) -> None:
        """A verse reference goes to verse search with its collection."""
        intent = route("Alma 32:21")
        assert intent.primary_endpoint == EndpointId.SCRIPTURE_VERSES
        assert intent.confidence == 0.9
        assert intent.suggested_params == {"collection_name": patterns.BOOK_OF_MORMON}
        assert intent.fallback_endpoints == (EndpointId.ARCHIVE,)

    def test_bible_reference_includes_testament(self) -> None:
        """Bible references carry the testament."""
        params = route("John 3:16").suggested_params
        assert params == {"collection_name": patterns.BIBLE, "testament": patterns.NEW_TESTAMENT}

    @pytest.mark.parametrize("query", ["D&C 76", "1 Nephi 3", "Moses 1:39"])
    def test_reference_shapes_route_to_scripture_search(self, query: str) -> None:
        """Every reference shape reaches verse search."""
        assert route(query).primary_endpoint == EndpointId.SCRIPTURE_VERSES

    def test_reference_outranks_speaker(self) -> None:
        """A full reference wins even when a speaker is named."""
        assert route("Elder Holland on Alma 32:21").primary_endpoint == EndpointId.SCRIPTURE_VERSES

    def test_book_name_does_not_outrank_speaker(self) -> None:
        """A bare book name does not override a speaker."""
        assert route("Elder Holland on the Book of Mormon").primary_endpoint == EndpointId.ARCHIVE

    def test_conference_without_speaker(self) -> None:
        """Conference vocabulary goes to conference search with a year range."""
        intent = route("recent general conference talks on hope")
        assert intent.primary_endpoint == EndpointId.CONFERENCE_TALKS
        assert intent.confidence == 0.85
        assert intent.suggested_params == {"start_year": 2023, "end_year": 2025}
        assert intent.fallback_endpoints == (EndpointId.ARCHIVE, EndpointId.MULTI_TYPE)

    def test_conference_without_dates_has_no_year_params(self) -> None:
        """Without dates the endpoint's own default range applies."""
        assert route("conference talks on prayer").suggested_params == {}

    def test_come_follow_me(self) -> None:
        """Come, Follow Me has its own endpoint."""
        intent = route("come follow me lesson 5")
        assert intent.primary_endpoint == EndpointId.COME_FOLLOW_ME
        assert intent.confidence == 0.8

    def test_handbook_and_policy(self) -> None:
        """Handbook and policy vocabulary go to the General Handbook."""
        assert route("general handbook temple recommends").primary_endpoint == EndpointId.GENERAL_HANDBOOK
        assert route("missionary policy").primary_endpoint == EndpointId.GENERAL_HANDBOOK

    def test_seminary(self) -> None:
        """Seminary queries carry the lesson number."""
        intent = route("seminary lesson 12")
        assert intent.primary_endpoint == EndpointId.SEMINARY
        assert intent.confidence == 0.8
        assert intent.suggested_params == {"lesson_number": 12}

    def test_seminary_with_book_name_is_scripture(self) -> None:
        """Scripture vocabulary is checked before manual vocabulary."""
        assert route("seminary lesson on mosiah").primary_endpoint == EndpointId.SCRIPTURE_VERSES

    def test_seminary_subject_for_fallback(self) -> None:
        """The seminary schema still picks up a subject when rebuilt as a fallback."""
        query = "seminary lesson 4 mosiah"
        params = build_params(EndpointId.SEMINARY, query, analyze(query, current_year=2025), 2025)
        assert params == {"lesson_number": 4, "subject": "book-of-mormon"}

    def test_strength_of_youth(self) -> None:
        """For the Strength of Youth uses the multi-type search with its site filter."""
        intent = route("for the strength of youth dating")
        assert intent.primary_endpoint == EndpointId.MULTI_TYPE
        assert intent.suggested_params["filter"] == STRENGTH_OF_YOUTH_SITE_FILTER

    def test_generic_manual(self) -> None:
        """Other manual queries search the manuals directory."""
        intent = route("teaching manual on the atonement")
        assert intent.primary_endpoint == EndpointId.MULTI_TYPE
        assert intent.confidence == 0.7
        assert intent.suggested_params["filter"] == MANUALS_SITE_FILTER

    def test_media(self) -> None:
        """Media queries carry the media type."""
        intent = route("easter video")
        assert intent.primary_endpoint == EndpointId.MEDIA
        assert intent.confidence == 0.75
        assert intent.suggested_params == {"search_type": "video"}

    def test_magazine(self) -> None:
        """Magazine queries get an inferred date range."""
        intent = route("liahona articles past 5 years")
        assert intent.primary_endpoint == EndpointId.MAGAZINES
        assert intent.confidence == 0.7
        assert intent.suggested_params == {"date_range": "past-5-years"}

    def test_default(self) -> None:
        """Unclassified queries go to the archive without a source."""
        intent = route("tithing")
        assert intent.primary_endpoint == EndpointId.ARCHIVE
        assert intent.confidence == 0.6
        assert "source" not in intent.suggested_params
        assert intent.fallback_endpoints == (EndpointId.MULTI_TYPE,)

    @pytest.mark.parametrize("query", ["how to cook rice", "tulips in holland"])
    def test_common_word_surnames_need_honorific(self, query: str) -> None:
        """"cook" and "holland" alone are not speakers."""
        intent = route(query)
        assert analyze(query, current_year=2025).suggested_filters.speaker is None
        assert intent.primary_endpoint == EndpointId.ARCHIVE
        assert "author" not in intent.suggested_params

    def test_surname_with_honorific_is_a_speaker(self) -> None:
        """"Elder Cook" still names Quentin L. Cook."""
        intent = route("Elder Cook on ministering")
        assert intent.suggested_params["author"] == "quentin-l-cook"

    def test_decade_in_progress(self) -> None:
        """A decade without an archive preset becomes a custom range up to this year."""
        intent = route("talks from the 2020s by Elder Bednar")
        assert intent.primary_endpoint == EndpointId.ARCHIVE
        assert intent.suggested_params["author"] == "david-a-bednar"
        assert intent.suggested_params["date_range"] == "custom-date-range"
        assert intent.suggested_params["begin_date"] == "2020-01-01"
        assert intent.suggested_params["end_date"] == "2025-12-31"


class TestResolveProperties:
    """Invariants that hold for every query."""

    QUERIES = [
        "",
        "Russell M. Nelson faith",
        "Alma 32:21",
        "come follow me lesson 5",
        "conference 2020",
        "hymns",
        "ensign 1990s",
        "tithing",
        "general handbook",
        "seminary lesson 3",
    ]

    @pytest.mark.parametrize("query", QUERIES)
    def test_fallbacks_exclude_primary_and_are_unique(self, query: str) -> None:
        """The fallback list never holds the primary or a duplicate."""
        intent = route(query)
        assert intent.primary_endpoint not in intent.fallback_endpoints
        assert len(set(intent.fallback_endpoints)) == len(intent.fallback_endpoints)

    @pytest.mark.parametrize("query", QUERIES)
    def test_confidence_in_range(self, query: str) -> None:
        """Confidence is a probability."""
        assert 0.0 <= route(query).confidence <= 1.0

    @pytest.mark.parametrize("query", QUERIES)
    def test_idempotent(self, query: str) -> None:
        """Routing is a pure function of query and year."""
        assert route(query) == route(query)

    def test_specific_matches_outrank_generic(self) -> None:
        """Speaker and reference matches are more confident than keyword matches."""
        assert route("Elder Uchtdorf").confidence >= 0.85
        assert route("Alma 32:21").confidence > route("manual").confidence
        assert route("Elder Uchtdorf").confidence > route("tithing").confidence


class TestHints:
    """Tests for caller content hints."""

    def test_hint_applies_when_unknown(self) -> None:
        """A hint routes an otherwise unclassified query."""
        intent = route("faith", hints=SearchHints(content_hint=ContentType.CONFERENCE))
        assert intent.primary_endpoint == EndpointId.CONFERENCE_TALKS

    def test_hint_ignored_when_detected(self) -> None:
        """A hint never overrides a detected content type."""
        intent = route("Alma 32:21", hints=SearchHints(content_hint=ContentType.MAGAZINE))
        assert intent.primary_endpoint == EndpointId.SCRIPTURE_VERSES

    def test_apply_hints_without_hint(self) -> None:
        """No hint returns the same analysis."""
        analysis = analyze("faith", current_year=2025)
        assert apply_hints(analysis, None) is analysis
        assert apply_hints(analysis, SearchHints()) is analysis


class TestBuildParams:
    """Tests for per-endpoint parameter rebuilding."""

    def test_every_endpoint_has_a_builder(self) -> None:
        """Parameters can be built for every endpoint id."""
        analysis = analyze("faith", current_year=2025)
        for endpoint in EndpointId:
            assert isinstance(build_params(endpoint, "faith", analysis, 2025), dict)

    def test_fallback_params_follow_target_schema(self) -> None:
        """Conference params are rebuilt as years and speaker, not archive filters."""
        query = "Elder Bednar 2019"
        analysis = analyze(query, current_year=2025)
        params = build_params(EndpointId.CONFERENCE_TALKS, query, analysis, 2025)
        assert params == {"start_year": 2019, "end_year": 2019, "speaker": "David A. Bednar"}

    def test_conference_params_carry_speaker(self) -> None:
        """A detected speaker is forwarded to conference search."""
        query = "Russell M. Nelson faith"
        analysis = analyze(query, current_year=2025)
        assert build_params(EndpointId.CONFERENCE_TALKS, query, analysis, 2025) == {
            "speaker": "Russell M. Nelson"
        }

    def test_archive_source_follows_content_type(self) -> None:
        """The archive source is derived from the content type."""
        query = "hymns"
        analysis = analyze(query, current_year=2025)
        assert build_params(EndpointId.ARCHIVE, query, analysis, 2025) == {"source": ArchiveSource.MEDIA}

    def test_scriptures_archive_book(self) -> None:
        """Scripture archive searches carry the archive book id."""
        query = "mosiah"
        analysis = analyze(query, current_year=2025)
        assert build_params(EndpointId.SCRIPTURES_ARCHIVE, query, analysis, 2025) == {"book": 73}

    def test_multi_type_params(self) -> None:
        """Multi-type fallbacks search web pages."""
        analysis = analyze("tithing", current_year=2025)
        assert build_params(EndpointId.MULTI_TYPE, "tithing", analysis, 2025) == {"search_type": "web"}


class TestParseEndpoint:
    """Tests for forced-endpoint parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("conference", EndpointId.CONFERENCE_TALKS),
            ("Scriptures", EndpointId.SCRIPTURE_VERSES),
            ("come-follow-me", EndpointId.COME_FOLLOW_ME),
            ("handbook", EndpointId.GENERAL_HANDBOOK),
            ("search_magazines_archive", EndpointId.MAGAZINES),
            ("search_vertex", EndpointId.MULTI_TYPE),
        ],
    )
    def test_aliases_and_ids(self, value: str, expected: EndpointId) -> None:
        """Aliases and full ids both resolve."""
        assert parse_endpoint(value) == expected

    def test_unknown(self) -> None:
        """Unknown names resolve to None."""
        assert parse_endpoint("bogus") is None
