"""Pytest configuration and fixtures for gospel-library-mcp tests."""

from __future__ import annotations

from typing import Any

import pytest

from gospel_library_mcp.admin.service import reset_config
from gospel_library_mcp.models.search import SearchOutcome, SearchResultItem
from gospel_library_mcp.search.endpoints import EndpointId
from gospel_library_mcp.searchers.base import Searcher

CURRENT_YEAR = 2025


def make_outcome(endpoint: EndpointId | str, count: int = 1) -> SearchOutcome:
    """Outcome with ``count`` hits whose titles name the endpoint."""
    name = endpoint.value if isinstance(endpoint, EndpointId) else endpoint
    return SearchOutcome.found(
        [
            SearchResultItem(
                title=f"{name} result {i}",
                uri=f"/{name}/{i}",
                link=f"https://www.churchofjesuschrist.org/study/{name}/{i}",
            )
            for i in range(count)
        ]
    )


class ScriptedSearcher(Searcher):
    """Searcher that replays a scripted response and records its calls.

    ``response`` may be a SearchOutcome, an exception instance to raise, or
    None for an empty outcome.
    """

    def __init__(self, endpoint: EndpointId, response: Any = None, log: list | None = None) -> None:
        super().__init__(provider=None)  # type: ignore[arg-type]
        self.endpoint_id = endpoint
        self.response = response
        self.calls: list[tuple[str, dict[str, Any], int]] = []
        self.log = log if log is not None else []

    async def search(
        self,
        query: str,
        params: dict[str, Any] | None = None,
        *,
        limit: int = 20,
    ) -> SearchOutcome:
        self.calls.append((query, dict(params or {}), limit))
        self.log.append(self.endpoint_id)
        if isinstance(self.response, BaseException):
            raise self.response
        if self.response is None:
            return SearchOutcome.empty()
        return self.response


@pytest.fixture
def current_year() -> int:
    """Fixed year so relative dates are deterministic."""
    return CURRENT_YEAR


@pytest.fixture
def call_log() -> list[EndpointId]:
    """Shared, ordered log of endpoint calls across scripted searchers."""
    return []


@pytest.fixture
def empty_searchers(call_log: list[EndpointId]) -> dict[EndpointId, ScriptedSearcher]:
    """One scripted searcher per endpoint, all returning no results."""
    return {endpoint: ScriptedSearcher(endpoint, log=call_log) for endpoint in EndpointId}


@pytest.fixture(autouse=True)
def _restore_config():
    """Undo runtime config changes made by a test."""
    yield
    reset_config()


@pytest.fixture
def archive_response() -> dict[str, Any]:
    """Archive (content-search-service) response body."""
    return {
        "searchInformation": {"totalResults": "42"},
        "items": [
            {
                "title": "The Power of Spiritual Momentum",
                "subtitle": "April 2022 general conference",
                "link": "https://www.churchofjesuschrist.org/study/general-conference/2022/04/47nelson?lang=eng",
                "htmlSnippet": "Ask in <b>faith</b>,<br>\n nothing wavering",
            },
            {
                "title": "Christ Is Risen; Faith in Him Will Move Mountains",
                "link": "https://www.churchofjesuschrist.org/study/general-conference/2021/04/49nelson?lang=eng",
                "snippet": "plain snippet",
            },
            {"title": "Entry without a link"},
        ],
        "spellCheck": {
            "spellingChanged": True,
            "originalQuery": "fiath",
            "display": "faith",
        },
    }


@pytest.fixture
def vertex_video_response() -> dict[str, Any]:
    """vertex-search response for a video search."""
    return {
        "totalResults": 1,
        "items": [
            {
                "title": "He Is Risen",
                "link": "https://www.churchofjesuschrist.org/media/video/2016-03-he-is-risen",
                "description": "An Easter message",
                "duration": "3:20",
                "videoUrl": "https://media.example.org/he-is-risen.mp4",
            }
        ],
    }


@pytest.fixture
def seminary_response() -> dict[str, Any]:
    """vertex-search response in the structured-document format."""
    return {
        "totalSize": 7,
        "nextPageToken": "abc",
        "results": [
            {
                "document": {
                    "derivedStructData": {
                        "fields": {
                            "link": {
                                "stringValue": "https://www.churchofjesuschrist.org/study/manual/book-of-mormon-seminary-teacher-manual-2024/lesson-5"
                            },
                            "title": {"stringValue": "Lesson 5: 1 Nephi 1"},
                            "displayLink": {"stringValue": "www.churchofjesuschrist.org"},
                            "snippets": {
                                "listValue": {
                                    "values": [{"stringValue": "Lehi <b>prays</b> for his people"}]
                                }
                            },
                        }
                    }
                }
            },
            {"document": {}},
        ],
    }


@pytest.fixture
def content_response() -> dict[str, Any]:
    """Content API response for a scripture chapter."""
    return {
        "meta": {
            "title": "Alma 32",
            "contentType": "chapter",
            "publication": "The Book of Mormon",
            "audioUrl": "https://media.example.org/alma-32.mp3",
        },
        "content": {
            "head": "<title>Alma 32</title>",
            "body": (
                "<header><h1>Alma 32</h1></header>"
                "<p class='verse'><span>21</span> And now as I said concerning "
                "<strong>faith</strong>.</p><script>track()</script>"
            ),
            "footnotes": [
                {
                    "noteNumber": "1",
                    "noteMarker": "21a",
                    "noteContent": "<p>TG Faith.</p>",
                    "noteRefs": [{"href": "/scriptures/tg/faith", "text": "TG Faith"}],
                }
            ],
        },
    }
