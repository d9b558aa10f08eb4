"""Search orchestration: run the routed endpoints and collect their outcomes.

Smart mode walks a small state machine:

    PRIMARY -> FALLBACK(0) -> ... -> FALLBACK(n-1) -> EXHAUSTED

Each state calls one endpoint. The first non-empty outcome ends the walk.
Empty outcomes and failed calls both advance it; the attempt log records
which one happened. Comprehensive mode runs the primary and the first
fallbacks concurrently and merges whatever came back. Specific mode calls a
single endpoint chosen by the caller.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Mapping

from gospel_library_mcp.metrics import record_call
from gospel_library_mcp.models.search import (
    ClassifiedSearchResponse,
    EndpointAttempt,
    SearchOutcome,
    SourceResult,
)
from gospel_library_mcp.search.analyzer import ContentType, QueryAnalysis, analyze, resolve_year
from gospel_library_mcp.search.endpoints import EndpointId, build_params, parse_endpoint
from gospel_library_mcp.search.intent import SearchHints, SearchIntent, apply_hints, resolve
from gospel_library_mcp.searchers.base import SearchTransportError, Searcher

logger = logging.getLogger(__name__)

SEARCH_MODES = ("smart", "comprehensive", "specific")

# Confidence reported for results that came from a fallback endpoint
FALLBACK_CONFIDENCE = 0.5

MIN_COMPREHENSIVE_LIMIT = 5
MAX_LIMIT = 100


class InvalidInputError(ValueError):
    """The search request is malformed; raised before any endpoint is called."""


def comprehensive_limit(limit: int) -> int:
    """Per-endpoint result limit when several endpoints share one request."""
    return min(limit, max(MIN_COMPREHENSIVE_LIMIT, limit // 3))


def build_suggestions(analysis: QueryAnalysis) -> list[str]:
    """Reformulation tips for a query that found nothing."""
    suggestions = []
    if analysis.has_quotes:
        suggestions.append("Try removing quotes for broader search results")
    else:
        suggestions.append("Use quotes around phrases for exact matches")

    if analysis.content_type == ContentType.UNKNOWN:
        suggestions.append('Try adding specific terms like "conference", "scripture", or "manual"')
        suggestions.append("Consider searching in specific collections using specialized tools")

    if not analysis.has_date_terms and analysis.content_type in (
        ContentType.CONFERENCE,
        ContentType.MAGAZINE,
    ):
        suggestions.append('Add date terms like "recent", "2024", or "past 5 years" to narrow results')

    if analysis.has_speaker_terms:
        suggestions.append("Check the speaker's name or drop it to search all speakers")
    return suggestions


class SearchOrchestrator:
    """Routes queries to searchers and applies the fallback policy.

    Args:
        searchers: Searcher per endpoint id
        call_timeout: Seconds allowed per endpoint call
        comprehensive_fanout: Fallbacks run alongside the primary in comprehensive mode
    """

    def __init__(
        self,
        searchers: Mapping[EndpointId, Searcher],
        call_timeout: float = 30.0,
        comprehensive_fanout: int = 2,
    ) -> None:
        self.searchers = dict(searchers)
        self.call_timeout = call_timeout
        self.comprehensive_fanout = comprehensive_fanout

    async def execute(
        self,
        endpoint: EndpointId,
        query: str,
        params: dict[str, Any],
        limit: int,
    ) -> SearchOutcome:
        """Call one endpoint. Never raises for transport problems.

        Returns:
            SearchOutcome; failures come back with status ``error``
        """
        searcher = self.searchers.get(endpoint)
        if searcher is None:
            return SearchOutcome.failed(f"No searcher registered for {endpoint.value}", "NO_SEARCHER")

        started = time.perf_counter()
        try:
            outcome = await asyncio.wait_for(
                searcher.search(query, params, limit=limit), timeout=self.call_timeout
            )
        except SearchTransportError as e:
            outcome = SearchOutcome.failed(f"{type(e).__name__}: {e.message}", e.code)
        except asyncio.TimeoutError:
            outcome = SearchOutcome.failed(
                f"{endpoint.value} did not answer within {self.call_timeout}s", "TIMEOUT"
            )
        except Exception as e:
            logger.exception(f"Unexpected error from {endpoint.value}")
            outcome = SearchOutcome.failed(f"{type(e).__name__}: {str(e)}", "FETCH_ERROR")

        elapsed_ms = (time.perf_counter() - started) * 1000
        if outcome.status == "error":
            logger.warning(f"{endpoint.value} failed: {outcome.error_message}")
        record_call(
            endpoint=endpoint.value,
            success=outcome.status != "error",
            result_count=len(outcome.results),
            elapsed_ms=elapsed_ms,
            error=outcome.error_message,
        )
        return outcome

    async def execute_intent(
        self,
        query: str,
        analysis: QueryAnalysis,
        intent: SearchIntent,
        *,
        limit: int = 20,
        current_year: int | None = None,
    ) -> ClassifiedSearchResponse:
        """Run the primary endpoint, then each fallback until one has results."""
        year = resolve_year(current_year)
        attempts: list[EndpointAttempt] = []

        stages: list[tuple[str, EndpointId, dict[str, Any]]] = [
            ("primary", intent.primary_endpoint, intent.suggested_params)
        ]
        for index, endpoint in enumerate(intent.fallback_endpoints):
            stages.append((f"fallback-{index}", endpoint, {}))

        for stage, endpoint, params in stages:
            if stage != "primary":
                # Parameters are rebuilt for each endpoint's own schema
                params = build_params(endpoint, query, analysis, year)
            outcome = await self.execute(endpoint, query, params, limit)
            attempts.append(_attempt(endpoint, stage, outcome))

            if outcome.has_results:
                is_fallback = stage != "primary"
                logger.info(
                    f"{query!r} answered by {endpoint.value} ({stage}, {len(outcome.results)} results)"
                )
                return self._response(
                    query,
                    "smart",
                    "fallback_success" if is_fallback else "success",
                    analysis,
                    intent,
                    [
                        SourceResult(
                            endpoint=endpoint.value,
                            confidence=FALLBACK_CONFIDENCE if is_fallback else intent.confidence,
                            fallback=is_fallback,
                            outcome=outcome,
                        )
                    ],
                    attempts,
                )

        logger.info(f"{query!r} exhausted {len(attempts)} endpoint(s)")
        return self._response(
            query, "smart", "exhausted", analysis, intent, [], attempts, build_suggestions(analysis)
        )

    async def search_comprehensive(
        self,
        query: str,
        analysis: QueryAnalysis,
        intent: SearchIntent,
        *,
        limit: int = 20,
        current_year: int | None = None,
    ) -> ClassifiedSearchResponse:
        """Run the primary and the first fallbacks concurrently and merge them."""
        year = resolve_year(current_year)
        per_endpoint = comprehensive_limit(limit)

        planned: list[tuple[EndpointId, dict[str, Any], float, bool]] = [
            (intent.primary_endpoint, intent.suggested_params, intent.confidence, False)
        ]
        for endpoint in intent.fallback_endpoints[: self.comprehensive_fanout]:
            planned.append(
                (endpoint, build_params(endpoint, query, analysis, year), FALLBACK_CONFIDENCE, True)
            )

        outcomes = await asyncio.gather(
            *(self.execute(endpoint, query, params, per_endpoint) for endpoint, params, _, _ in planned)
        )

        sources = []
        attempts = []
        for (endpoint, _, confidence, is_fallback), outcome in zip(planned, outcomes):
            attempts.append(_attempt(endpoint, "comprehensive", outcome))
            if outcome.has_results:
                sources.append(
                    SourceResult(
                        endpoint=endpoint.value,
                        confidence=confidence,
                        fallback=is_fallback,
                        outcome=outcome,
                    )
                )

        if not sources:
            return self._response(
                query, "comprehensive", "exhausted", analysis, intent, [], attempts,
                build_suggestions(analysis),
            )
        status = "success" if not sources[0].fallback else "fallback_success"
        return self._response(query, "comprehensive", status, analysis, intent, sources, attempts)

    async def search_specific(
        self,
        query: str,
        analysis: QueryAnalysis,
        intent: SearchIntent,
        endpoint: EndpointId,
        *,
        limit: int = 20,
        current_year: int | None = None,
    ) -> ClassifiedSearchResponse:
        """Call the caller's chosen endpoint once."""
        if endpoint == intent.primary_endpoint:
            params = intent.suggested_params
        else:
            params = build_params(endpoint, query, analysis, resolve_year(current_year))
        confidence = 1.0

        outcome = await self.execute(endpoint, query, params, limit)
        attempts = [_attempt(endpoint, "specific", outcome)]
        forced = SearchIntent(
            primary_endpoint=endpoint,
            confidence=confidence,
            suggested_params=params,
            reasoning=f"Endpoint {endpoint.value} requested by caller",
        )
        if not outcome.has_results:
            return self._response(
                query, "specific", "exhausted", analysis, forced, [], attempts,
                build_suggestions(analysis),
            )
        source = SourceResult(endpoint=endpoint.value, confidence=confidence, outcome=outcome)
        return self._response(query, "specific", "success", analysis, forced, [source], attempts)

    async def classify_and_search(
        self,
        query: str,
        search_mode: str = "smart",
        force_endpoint: str | None = None,
        content_hint: str | None = None,
        limit: int = 20,
        current_year: int | None = None,
    ) -> ClassifiedSearchResponse:
        """Analyze a query, route it and run the search.

        Args:
            query: Free-text query
            search_mode: smart, comprehensive or specific
            force_endpoint: Endpoint alias or id (specific mode only)
            content_hint: Content type to assume when the query gives no clue
            limit: Maximum results per endpoint, 1-100
            current_year: Year used to resolve relative dates (default: this year)

        Returns:
            ClassifiedSearchResponse

        Raises:
            InvalidInputError: If the request is malformed
        """
        if not query or not query.strip():
            raise InvalidInputError("Query must not be empty")
        if search_mode not in SEARCH_MODES:
            raise InvalidInputError(
                f"Unknown search mode {search_mode!r}; expected one of {', '.join(SEARCH_MODES)}"
            )
        if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= MAX_LIMIT:
            raise InvalidInputError(f"limit must be between 1 and {MAX_LIMIT}, got {limit!r}")

        hints = SearchHints()
        if content_hint:
            try:
                hints = SearchHints(content_hint=ContentType(content_hint.strip().lower()))
            except ValueError:
                valid = ", ".join(c.value for c in ContentType)
                raise InvalidInputError(
                    f"Unknown content hint {content_hint!r}; expected one of {valid}"
                ) from None

        forced: EndpointId | None = None
        if search_mode == "specific":
            if not force_endpoint:
                raise InvalidInputError("Specific mode requires force_endpoint")
            forced = parse_endpoint(force_endpoint)
            if forced is None:
                raise InvalidInputError(f"Unknown endpoint {force_endpoint!r}")

        year = resolve_year(current_year)
        analysis = apply_hints(analyze(query, current_year=year), hints)
        intent = resolve(query, analysis, current_year=year)
        logger.debug(
            f"Routed {query!r} ({analysis.content_type.value}) to {intent.primary_endpoint.value} "
            f"at {intent.confidence}; fallbacks {[e.value for e in intent.fallback_endpoints]}"
        )

        if forced is not None:
            return await self.search_specific(
                query, analysis, intent, forced, limit=limit, current_year=year
            )
        if search_mode == "comprehensive":
            return await self.search_comprehensive(
                query, analysis, intent, limit=limit, current_year=year
            )
        return await self.execute_intent(query, analysis, intent, limit=limit, current_year=year)

    @staticmethod
    def _response(
        query: str,
        mode: str,
        status: str,
        analysis: QueryAnalysis,
        intent: SearchIntent,
        sources: list[SourceResult],
        attempts: list[EndpointAttempt],
        suggestions: list[str] | None = None,
    ) -> ClassifiedSearchResponse:
        return ClassifiedSearchResponse(
            query=query,
            search_mode=mode,
            status=status,
            content_type=analysis.content_type.value,
            primary_endpoint=intent.primary_endpoint.value,
            confidence=intent.confidence,
            reasoning=intent.reasoning,
            results_by_source=sources,
            attempts=attempts,
            suggestions=suggestions or [],
        )


def _attempt(endpoint: EndpointId, stage: str, outcome: SearchOutcome) -> EndpointAttempt:
    return EndpointAttempt(
        endpoint=endpoint.value,
        stage=stage,
        status=outcome.status,
        result_count=len(outcome.results),
        error_message=outcome.error_message,
        error_code=outcome.error_code,
    )
