"""Base provider interface for JSON APIs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass
class FetchResult:
    """Result from a JSON API call."""

    url: str
    data: Any
    status_code: int
    metadata: dict[str, Any]


class ContentProvider(ABC):
    """Abstract base class for HTTP providers."""

    @abstractmethod
    async def fetch_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> FetchResult:
        """Call a JSON endpoint.

        A request with ``payload`` is sent as a POST with a JSON body,
        anything else as a GET.

        Args:
            url: The endpoint URL
            params: Query string parameters
            payload: JSON body
            **kwargs: Additional provider-specific options

        Returns:
            FetchResult containing the decoded body and metadata
        """
        pass

    @abstractmethod
    def supports_url(self, url: str) -> bool:
        """Check if this provider supports the given URL.

        Args:
            url: The URL to check

        Returns:
            True if this provider can handle the URL
        """
        pass
