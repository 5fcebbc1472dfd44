"""
Pagination Combinator.

Wraps a listing endpoint and follows OpenStack keyset pagination until all
items (or a requested number of items) are read.

Next page resolution, in order:
    1. "links" / "<response_key>_links" entry with rel == "next"
    2. top level "next" href (image, dns)
    3. marker taken from the last item's id (or name) when the page was full

Usage:
    from ostack.sdk.api.paged import Pagination, paged

    networks = await paged(ListNetworks(), Pagination.limit(50)).query(session)

    async for server in paged(ListServers(), Pagination.all()).iter(session):
        ...
"""

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

from ostack.core.exceptions import PaginationError
from ostack.core.logging import get_logger, log_with_source
from ostack.sdk.api.endpoint import RestEndpoint, get_json

if TYPE_CHECKING:
    from ostack.sdk.session import AsyncOpenStack

logger = get_logger(__name__)


# =============================================================================
# Pagination Parameters
# =============================================================================


@dataclass(frozen=True)
class Pagination:
    """How many items to read: everything, or at most max_items."""

    max_items: int | None = None

    def __post_init__(self) -> None:
        if self.max_items is not None and self.max_items <= 0:
            raise ValueError("Pagination limit must be a positive number")

    @classmethod
    def all(cls) -> "Pagination":
        return cls()

    @classmethod
    def limit(cls, max_items: int) -> "Pagination":
        return cls(max_items=max_items)

    def is_last_page(self, total_read: int) -> bool:
        return self.max_items is not None and total_read >= self.max_items


# =============================================================================
# Next Page Resolution
# =============================================================================


def next_page_from_body(content: Any, response_key: str | None, current_url: str) -> str | None:
    """
    Find the URL of the next page in a response body.

    Relative hrefs are resolved against scheme://host:port of current_url.

    Raises:
        PaginationError: If a links entry has no `rel`
    """
    if not isinstance(content, dict):
        return None

    next_href = None
    links = content.get("links")
    if links is None and response_key:
        links = content.get(f"{response_key}_links")

    if links is not None:
        if isinstance(links, list):
            for link in links:
                if not isinstance(link, dict):
                    continue
                if "rel" not in link:
                    raise PaginationError("`rel` element is missing in links")
                if link["rel"] == "next":
                    next_href = link.get("href")
                    break
        elif isinstance(links, dict):
            # Keystone: {"links": {"next": null, "self": ...}}
            next_href = links.get("next")
    else:
        next_href = content.get("next")

    if not isinstance(next_href, str) or not next_href:
        return None
    if next_href.startswith("http"):
        return next_href

    parts = urlsplit(current_url)
    port = parts.port or (443 if parts.scheme == "https" else 80)
    return f"{parts.scheme}://{parts.hostname}:{port}{next_href}"


def _marker_from_item(item: Any) -> str | None:
    if isinstance(item, dict):
        for key in ("id", "name"):
            value = item.get(key)
            if isinstance(value, str):
                return value
    return None


# =============================================================================
# Paged Query
# =============================================================================


class Paged:
    """Paginated query over a listing endpoint."""

    def __init__(
        self,
        endpoint: RestEndpoint,
        pagination: Pagination,
        page_size: int | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.pagination = pagination
        self.page_size = page_size

    @property
    def use_keyset_pagination(self) -> bool:
        return "limit" in self.endpoint.query_fields

    def _per_page(self) -> int | None:
        if not self.use_keyset_pagination:
            return None
        own_limit = getattr(self.endpoint, "limit", None)
        if own_limit:
            return own_limit
        candidates = [v for v in (self.page_size, self.pagination.max_items) if v]
        return min(candidates) if candidates else None

    async def pages(self, session: "AsyncOpenStack") -> AsyncIterator[list[Any]]:
        """Yield pages (lists of items) until the data or the limit is exhausted."""
        endpoint = self.endpoint
        per_page = self._per_page()
        supports_marker = "marker" in endpoint.query_fields

        service_endpoint = await session.get_service_endpoint(
            endpoint.service_type, endpoint.api_version(),
        )
        base_url = service_endpoint.build_request_url(endpoint.endpoint())
        base_params = endpoint.parameters()

        next_url: str | None = None
        marker: str | None = None
        total_read = 0
        page_num = 0

        while True:
            if next_url is not None:
                url = next_url
            else:
                params = base_params.copy()
                if per_page is not None:
                    params.set("limit", per_page)
                if marker is not None:
                    params.set("marker", marker)
                url = params.add_to_url(base_url)

            page_num += 1
            log_with_source(logger, "sdk", "debug", "Fetching page", page=page_num, url=url)
            response = await endpoint.send(session, url=url)
            content = get_json(response)

            next_url = next_page_from_body(content, endpoint.response_key, url)
            if next_url == url:
                next_url = None

            data = content
            if endpoint.response_key is not None:
                data = content.get(endpoint.response_key) if isinstance(content, dict) else None
            if data is None:
                data = []
            if not isinstance(data, list):
                raise PaginationError(
                    f"response `{endpoint.response_key}` is not a list",
                )

            raw_len = len(data)
            next_marker = _marker_from_item(data[-1]) if data else None

            if endpoint.response_list_item_key:
                key = endpoint.response_list_item_key
                data = [item.get(key) if isinstance(item, dict) else item for item in data]

            if self.pagination.max_items is not None:
                data = data[: self.pagination.max_items - total_read]
            total_read += len(data)

            if data:
                yield data

            if raw_len == 0 or self.pagination.is_last_page(total_read):
                break
            if next_url is None:
                page_full = per_page is not None and raw_len >= per_page
                if not (page_full and supports_marker and next_marker):
                    break
                marker = next_marker

    async def query(self, session: "AsyncOpenStack") -> list[Any]:
        """Read all pages and return the collected items."""
        results: list[Any] = []
        async for page in self.pages(session):
            results.extend(page)
        return results

    async def iter(self, session: "AsyncOpenStack") -> AsyncIterator[Any]:
        """Iterate over items, fetching pages lazily."""
        async for page in self.pages(session):
            for item in page:
                yield item


def paged(
    endpoint: RestEndpoint,
    pagination: Pagination | None = None,
    page_size: int | None = None,
) -> Paged:
    """Wrap a listing endpoint into a paginated query."""
    return Paged(endpoint, pagination or Pagination.all(), page_size=page_size)
