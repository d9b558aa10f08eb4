"""JSON provider using the Python requests library."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import urlparse

import requests

from gospel_library_mcp.providers.base import ContentProvider, FetchResult

# Configure logging
logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "Gospel-Library-MCP/0.1"


class RequestsProvider(ContentProvider):
    """JSON client built on a requests session.

    Calls are made once; a failed call is reported to the caller, which moves
    on to another endpoint instead of retrying this one.
    """

    def __init__(
        self,
        timeout: int = 30,
        user_agent: str = DEFAULT_USER_AGENT,
    ) -> None:
        """Initialize the requests provider.

        Args:
            timeout: Request timeout in seconds (default: 30)
            user_agent: User agent string
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self.session = requests.Session()
        logger.info(f"RequestsProvider initialized (timeout={timeout}s)")

    def supports_url(self, url: str) -> bool:
        """Check if this provider supports the given URL.

        Args:
            url: The URL to check

        Returns:
            True if the URL uses http or https scheme
        """
        try:
            parsed = urlparse(url)
            return parsed.scheme in ("http", "https") and bool(parsed.netloc)
        except ValueError:
            return False

    async def fetch_json(
        self,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> FetchResult:
        """Call a JSON endpoint.

        Args:
            url: The endpoint URL
            params: Query string parameters
            payload: JSON body; switches the request to POST
            **kwargs: Additional options
                - timeout: Request timeout in seconds
                - headers: Custom HTTP headers

        Returns:
            FetchResult with the decoded JSON body

        Raises:
            requests.RequestException: If the request fails or the status is not 2xx
            ValueError: If the body is not valid JSON
        """
        timeout = kwargs.get("timeout", self.timeout)
        headers = dict(kwargs.get("headers") or {})
        headers.setdefault("User-Agent", self.user_agent)
        headers.setdefault("Accept", "application/json")

        if payload is not None:
            method = "POST"
            call = lambda: self.session.post(  # noqa: E731
                url, params=params, json=payload, headers=headers, timeout=timeout
            )
        else:
            method = "GET"
            call = lambda: self.session.get(  # noqa: E731
                url, params=params, headers=headers, timeout=timeout
            )

        logger.debug(f"{method} {url} params={params}")

        # Run requests in thread pool to avoid blocking
        loop = asyncio.get_event_loop()
        response = await loop.run_in_executor(None, call)

        # Raise for bad status codes
        response.raise_for_status()

        return FetchResult(
            url=url,
            data=response.json(),
            status_code=response.status_code,
            metadata={
                "method": method,
                "elapsed_ms": response.elapsed.total_seconds() * 1000,
            },
        )
