"""Pydantic models for search outcomes and routed search responses."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class SearchResultItem(BaseModel):
    """One normalized search hit."""

    title: str = Field(description="Title of the matching document")
    uri: str = Field(description="Gospel Library URI, usable with fetch_content")
    link: str = Field(description="Full link to the document")
    snippet: str | None = Field(default=None, description="Cleaned text preview")
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Endpoint-specific details"
    )


class SearchOutcome(BaseModel):
    """Result of a single endpoint call."""

    status: Literal["results", "no_results", "error"] = Field(
        description="Whether the call returned hits, returned nothing, or failed"
    )
    results: list[SearchResultItem] = Field(default_factory=list, description="Hits")
    total: int = Field(default=0, description="Total hits reported by the endpoint")
    error_message: str | None = Field(default=None, description="Error message if failed")
    error_code: str | None = Field(default=None, description="Error code if failed")
    metadata: dict[str, Any] = Field(
        default_factory=dict, description="Call details such as a spelling correction"
    )

    @classmethod
    def found(
        cls,
        results: list[SearchResultItem],
        total: int | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> SearchOutcome:
        if not results:
            return cls.empty(total or 0, metadata)
        return cls(
            status="results",
            results=results,
            total=max(total or 0, len(results)),
            metadata=metadata or {},
        )

    @classmethod
    def empty(cls, total: int = 0, metadata: dict[str, Any] | None = None) -> SearchOutcome:
        return cls(status="no_results", total=total, metadata=metadata or {})

    @classmethod
    def failed(cls, message: str, code: str) -> SearchOutcome:
        return cls(status="error", error_message=message, error_code=code)

    @property
    def has_results(self) -> bool:
        return self.status == "results" and bool(self.results)


class SourceResult(BaseModel):
    """Outcome of one endpoint, tagged with where it came from."""

    endpoint: str = Field(description="Endpoint id that produced the outcome")
    confidence: float = Field(description="Routing confidence for this endpoint")
    fallback: bool = Field(default=False, description="Whether the endpoint was a fallback")
    outcome: SearchOutcome = Field(description="The endpoint's outcome")


class EndpointAttempt(BaseModel):
    """Log entry for one endpoint call."""

    endpoint: str = Field(description="Endpoint id that was called")
    stage: str = Field(description="primary, fallback-<n>, comprehensive or specific")
    status: Literal["results", "no_results", "error"] = Field(description="Call outcome")
    result_count: int = Field(default=0, description="Number of hits returned")
    error_message: str | None = Field(default=None, description="Error message if failed")
    error_code: str | None = Field(default=None, description="Error code if failed")


class ClassifiedSearchResponse(BaseModel):
    """Response of a routed search."""

    query: str = Field(description="The query that was searched")
    search_mode: str = Field(description="smart, comprehensive or specific")
    status: Literal["success", "fallback_success", "exhausted"] = Field(
        description="success if the primary answered, fallback_success if a fallback did"
    )
    content_type: str = Field(description="Detected content type")
    primary_endpoint: str = Field(description="Endpoint chosen first")
    confidence: float = Field(description="Routing confidence of the primary endpoint")
    reasoning: str = Field(default="", description="Why the primary endpoint was chosen")
    results_by_source: list[SourceResult] = Field(
        default_factory=list, description="Non-empty outcomes, tagged by endpoint"
    )
    attempts: list[EndpointAttempt] = Field(
        default_factory=list, description="Every endpoint call made, in order"
    )
    suggestions: list[str] = Field(
        default_factory=list, description="Query reformulation tips when nothing was found"
    )

    @property
    def total_results(self) -> int:
        return sum(len(source.outcome.results) for source in self.results_by_source)
