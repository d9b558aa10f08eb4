"""Base searcher interface and shared response parsing."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

import requests

from gospel_library_mcp.models.search import SearchOutcome, SearchResultItem
from gospel_library_mcp.providers import ContentProvider
from gospel_library_mcp.search.endpoints import EndpointId
from gospel_library_mcp.utils import clean_snippet, extract_uri

logger = logging.getLogger(__name__)

SEARCH_PROXY_URL = "https://www.churchofjesuschrist.org/search/proxy"

# Exclusions the site search applies to keep one hit per document
STANDARD_EXCLUSIONS = (
    ' AND (siteSearch:"*lang=eng*" OR -siteSearch:"*lang=*")'
    ' AND -siteSearch:"*imageView=*"'
    ' AND -siteSearch:"*adbid=*"'
    ' AND -siteSearch:"*adbpl=*"'
    ' AND -siteSearch:"*adbpr=*"'
    ' AND -siteSearch:"*cid=*"'
    ' AND -siteSearch:"*short_code=*"'
)


class SearchTransportError(Exception):
    """An endpoint call failed: HTTP error, network failure or malformed body."""

    def __init__(self, message: str, code: str) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class Searcher(ABC):
    """Executes searches against one endpoint."""

    endpoint_id: EndpointId

    def __init__(self, provider: ContentProvider, lang: str = "eng") -> None:
        self.provider = provider
        self.lang = lang

    @abstractmethod
    async def search(
        self,
        query: str,
        params: dict[str, Any] | None = None,
        *,
        limit: int = 20,
    ) -> SearchOutcome:
        """Search the endpoint.

        Args:
            query: Query text
            params: Endpoint parameters (see ``build_params``)
            limit: Maximum number of results to keep

        Returns:
            SearchOutcome with status results or no_results

        Raises:
            SearchTransportError: If the call fails
        """
        pass

    async def _fetch(
        self,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        payload: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        url = f"{SEARCH_PROXY_URL}/{path}"
        try:
            result = await self.provider.fetch_json(url, params=params, payload=payload)
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise SearchTransportError(
                f"{self.endpoint_id.value} failed: {e}", str(status) if status else "FETCH_ERROR"
            ) from e
        except requests.Timeout as e:
            raise SearchTransportError(f"{self.endpoint_id.value} timed out: {e}", "TIMEOUT") from e
        except ValueError as e:
            # requests' JSONDecodeError is a ValueError
            raise SearchTransportError(
                f"{self.endpoint_id.value} returned invalid JSON: {e}", "INVALID_RESPONSE"
            ) from e
        except requests.RequestException as e:
            raise SearchTransportError(f"{self.endpoint_id.value} failed: {e}", "FETCH_ERROR") from e

        if not isinstance(result.data, dict):
            raise SearchTransportError(
                f"{self.endpoint_id.value} returned {type(result.data).__name__}, expected an object",
                "INVALID_RESPONSE",
            )
        return result.data


def parse_total(data: dict[str, Any]) -> int:
    """Read the total hit count; endpoints report it in different places."""
    info = data.get("searchInformation") or {}
    raw = info.get("totalResults", data.get("totalResults", data.get("totalSize", 0)))
    try:
        return int(raw)
    except (TypeError, ValueError):
        return 0


def spelling_metadata(data: dict[str, Any]) -> dict[str, Any]:
    """Surface a spelling correction reported by the endpoint."""
    spell = data.get("spellCheck") or {}
    if not spell.get("spellingChanged"):
        return {}
    return {
        "spelling_correction": {
            "original": spell.get("originalQuery"),
            "corrected": spell.get("display"),
        }
    }


def parse_item(item: dict[str, Any], snippet_keys: tuple[str, ...] = ("htmlSnippet", "snippet")) -> SearchResultItem | None:
    """Normalize one ``items[]`` entry. Returns None for entries without a link."""
    link = item.get("link") or item.get("url")
    if not link:
        return None
    snippet = None
    for key in snippet_keys:
        if item.get(key):
            snippet = clean_snippet(item[key])
            break
    metadata: dict[str, Any] = {}
    if item.get("subtitle"):
        metadata["collection"] = item["subtitle"]
    if item.get("displayLink"):
        metadata["display_link"] = item["displayLink"]
    return SearchResultItem(
        title=item.get("title") or item.get("displayTitle") or "Untitled",
        uri=extract_uri(link),
        link=link,
        snippet=snippet,
        metadata=metadata,
    )


def parse_items(data: dict[str, Any], limit: int, **kwargs: Any) -> list[SearchResultItem]:
    items = data.get("items") or []
    if not isinstance(items, list):
        raise SearchTransportError("items is not a list", "INVALID_RESPONSE")
    results = []
    for raw in items:
        if not isinstance(raw, dict):
            continue
        item = parse_item(raw, **kwargs)
        if item is not None:
            results.append(item)
        if len(results) >= limit:
            break
    return results


def items_outcome(data: dict[str, Any], limit: int, **kwargs: Any) -> SearchOutcome:
    """Build an outcome from an ``items[]`` style response."""
    return SearchOutcome.found(
        parse_items(data, limit, **kwargs),
        total=parse_total(data),
        metadata=spelling_metadata(data),
    )
