"""Endpoint searchers: one per search endpoint id."""

from gospel_library_mcp.searchers.archive import (
    ArchiveSearcher,
    MagazineArchiveSearcher,
    ScriptureArchiveSearcher,
)
from gospel_library_mcp.searchers.base import SearchTransportError, Searcher
from gospel_library_mcp.searchers.conference import ConferenceSearcher
from gospel_library_mcp.searchers.scriptures import ScriptureSearcher
from gospel_library_mcp.searchers.seminary import SeminarySearcher
from gospel_library_mcp.searchers.vertex import (
    ComeFollowMeSearcher,
    GeneralHandbookSearcher,
    MediaSearcher,
    VertexSearcher,
)

SEARCHER_CLASSES: tuple[type[Searcher], ...] = (
    ArchiveSearcher,
    MagazineArchiveSearcher,
    ScriptureArchiveSearcher,
    ConferenceSearcher,
    ScriptureSearcher,
    VertexSearcher,
    MediaSearcher,
    ComeFollowMeSearcher,
    GeneralHandbookSearcher,
    SeminarySearcher,
)

__all__ = [
    "Searcher",
    "SearchTransportError",
    "ArchiveSearcher",
    "MagazineArchiveSearcher",
    "ScriptureArchiveSearcher",
    "ConferenceSearcher",
    "ScriptureSearcher",
    "VertexSearcher",
    "MediaSearcher",
    "ComeFollowMeSearcher",
    "GeneralHandbookSearcher",
    "SeminarySearcher",
    "SEARCHER_CLASSES",
]
