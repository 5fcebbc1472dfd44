"""
REST Endpoint Abstraction.

Every API operation is a RestEndpoint subclass: a pydantic model whose
fields are the path, query, header and body parameters of the request, and
whose class attributes describe how the request is built.

    class GetNetwork(RestEndpoint):
        service_type = ServiceType.NETWORK
        path = "v2.0/networks/{id}"
        response_key = "network"

        id: str

    data = await GetNetwork(id="abc").query(session)

The query pipeline:
    1. resolve the service endpoint for the service type and API version
    2. build the URL (ServiceEndpoint.build_request_url) plus query params
    3. send with Accept: application/json and the endpoint headers
    4. raise on error status codes (ApiError.from_response)
    5. parse JSON, take response_key, inject mapped response headers
"""

from collections.abc import AsyncIterable, AsyncIterator
from string import Formatter
from typing import IO, TYPE_CHECKING, Any, ClassVar, TypeVar
from urllib.parse import quote

import anyio
import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ostack.core.exceptions import ApiError, DataTypeError, OpenStackServiceError, UrlBuildError
from ostack.core.logging import get_logger, log_with_source
from ostack.sdk.params import CommaSeparatedList, JsonBodyParams, QueryParams
from ostack.sdk.types import ApiVersion, ServiceType

if TYPE_CHECKING:
    from ostack.sdk.session import AsyncOpenStack

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)

BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


class RestEndpoint(BaseModel):
    """
    Base class for request builders.

    Class attributes:
        method: HTTP method
        path: Format string relative to the service endpoint ("v2.0/networks/{id}")
        service_type: Service the request is sent to
        response_key: Root key of the JSON response to return
        response_list_item_key: Key wrapping each item of a list response
        query_fields: Field name → query parameter name
        header_fields: Field name → request header name
        body_key: Key wrapping the JSON body ({"network": {...}})
        body_fields: Fields sent in the body (default: all remaining fields)
        response_headers: Response header → key injected into the result
        microversion: Microversion requested with OpenStack-API-Version
        raw_path_fields: Path fields whose "/" must not be quoted
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    method: ClassVar[str] = "GET"
    path: ClassVar[str]
    service_type: ClassVar[ServiceType]
    response_key: ClassVar[str | None] = None
    response_list_item_key: ClassVar[str | None] = None
    query_fields: ClassVar[dict[str, str]] = {}
    header_fields: ClassVar[dict[str, str]] = {}
    body_key: ClassVar[str | None] = None
    body_fields: ClassVar[tuple[str, ...] | None] = None
    response_headers: ClassVar[dict[str, str]] = {}
    microversion: ClassVar[str | None] = None
    raw_path_fields: ClassVar[frozenset[str]] = frozenset()

    headers: dict[str, str] = Field(default_factory=dict, exclude=True)

    # -------------------------------------------------------------------------
    # Request description
    # -------------------------------------------------------------------------

    @classmethod
    def path_fields(cls) -> list[str]:
        return [name for _, name, _, _ in Formatter().parse(cls.path) if name]

    def endpoint(self) -> str:
        """Relative endpoint path with path parameters substituted."""
        values = {}
        for name in self.path_fields():
            value = getattr(self, name, None)
            if value is None or value == "":
                raise UrlBuildError(f"path parameter `{name}` is not set")
            safe = "/" if name in self.raw_path_fields else ""
            values[name] = quote(str(value), safe=safe)
        return self.path.format(**values)

    def api_version(self) -> ApiVersion | None:
        """API version the request requires from the service endpoint."""
        if self.microversion:
            return ApiVersion.from_str(self.microversion)
        return ApiVersion.from_endpoint_path(self.path)

    def parameters(self) -> QueryParams:
        params = QueryParams()
        for field_name, param in self.query_fields.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            if isinstance(value, (list, tuple, set)) and not isinstance(value, CommaSeparatedList):
                params.extend(param, value)
            else:
                params.push(param, value)
        return params

    def request_headers(self) -> dict[str, str]:
        headers: dict[str, str] = {}
        for field_name, header in self.header_fields.items():
            value = getattr(self, field_name)
            if value is not None:
                headers[header] = str(value)
        headers.update(self.headers)
        if self.microversion:
            headers.update(
                ApiVersion.from_str(self.microversion).microversion_headers(self.service_type)
            )
        return headers

    def _body_field_names(self) -> set[str]:
        if self.body_fields is not None:
            return set(self.body_fields)
        skip = set(self.path_fields()) | set(self.query_fields) | set(self.header_fields)
        skip.add("headers")
        return {
            name for name, info in type(self).model_fields.items()
            if name not in skip and not info.exclude
        }

    def body(self) -> tuple[str, bytes | AsyncIterable[bytes]] | None:
        """Content type and payload, or None when the request has no body."""
        if self.method not in BODY_METHODS:
            return None
        names = self._body_field_names()
        values = self.model_dump(include=names, by_alias=True, exclude_none=True, mode="json")
        if not values and self.body_key is None:
            return None
        return JsonBodyParams(self.body_key).update(values).into_body()

    # -------------------------------------------------------------------------
    # Query
    # -------------------------------------------------------------------------

    async def prepare(
        self, session: "AsyncOpenStack", url: str | None = None,
    ) -> tuple[str, dict[str, str], bytes | AsyncIterable[bytes] | None]:
        """Resolve the URL, headers and body for this request."""
        if url is None:
            service_endpoint = await session.get_service_endpoint(
                self.service_type, self.api_version(),
            )
            url = self.parameters().add_to_url(
                service_endpoint.build_request_url(self.endpoint())
            )
        headers = {"Accept": "application/json"}
        headers.update(self.request_headers())
        content = None
        body = self.body()
        if body is not None:
            headers["Content-Type"], content = body
        return url, headers, content

    async def send(self, session: "AsyncOpenStack", url: str | None = None) -> httpx.Response:
        request_url, headers, content = await self.prepare(session, url)
        return await session.rest(self.method, request_url, headers=headers, content=content)

    def process_response(self, response: httpx.Response) -> Any:
        """Check the status, parse JSON, take response_key and inject headers."""
        value = get_json(response)
        if self.response_key is not None and isinstance(value, dict):
            value = value.get(self.response_key)
        if self.response_headers:
            if value is None:
                value = {}
            if isinstance(value, dict):
                for header, target in self.response_headers.items():
                    if header in response.headers:
                        value[target] = response.headers[header]
        return value

    async def query(self, session: "AsyncOpenStack") -> Any:
        """Perform the request and return the decoded JSON value."""
        response = await self.send(session)
        return self.process_response(response)

    async def query_typed(self, session: "AsyncOpenStack", model: type[M]) -> M:
        """Perform the request and validate the result into a pydantic model."""
        return to_model(await self.query(session), model)

    async def raw_query(self, session: "AsyncOpenStack", inspect_error: bool = True) -> httpx.Response:
        """Perform the request and return the response untouched."""
        response = await self.send(session)
        if inspect_error:
            check_response_error(response)
        return response

    async def download(self, session: "AsyncOpenStack", sink: IO[bytes]) -> httpx.Headers:
        """
        Stream the response body into a binary file object.

        Returns:
            Response headers
        """
        url, headers, content = await self.prepare(session)
        headers["Accept"] = "*/*"
        async with session.stream(self.method, url, headers=headers, content=content) as response:
            if not response.is_success:
                await response.aread()
                check_response_error(response)
            async for chunk in response.aiter_bytes():
                sink.write(chunk)
            return response.headers


class Ignore:
    """Run an endpoint, checking only the status code. Used for DELETE and actions."""

    def __init__(self, endpoint: RestEndpoint) -> None:
        self.endpoint = endpoint

    async def query(self, session: "AsyncOpenStack") -> None:
        response = await self.endpoint.send(session)
        check_response_error(response)


def ignore(endpoint: RestEndpoint) -> Ignore:
    return Ignore(endpoint)


# =============================================================================
# Response helpers
# =============================================================================


def check_response_error(response: httpx.Response) -> None:
    """Raise the matching ApiError when the response status is not a success."""
    if not response.is_success:
        uri = str(response.request.url) if response.request else ""
        error = ApiError.from_response(uri, response.status_code, response.content)
        log_with_source(
            logger,
            "sdk",
            "debug",
            "Request failed",
            status_code=response.status_code,
            url=uri,
            error=error.message,
        )
        raise error


def get_json(response: httpx.Response) -> Any:
    """
    Decode a JSON response body.

    Raises:
        ApiError: For error status codes
        OpenStackServiceError: When a successful response is not JSON
    """
    check_response_error(response)
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError as e:
        uri = str(response.request.url) if response.request else ""
        raise OpenStackServiceError(response.status_code, uri, response.text) from e


def to_model(value: Any, model: type[M]) -> M:
    """Validate a JSON value into a pydantic model, raising DataTypeError on mismatch."""
    try:
        return model.model_validate(value)
    except ValidationError as e:
        raise DataTypeError(model.__name__, e) from e


async def file_chunks(path: str, chunk_size: int = 1024 * 1024) -> AsyncIterator[bytes]:
    """Read a file as an async stream of chunks for upload bodies."""
    async with await anyio.open_file(path, "rb") as f:
        while True:
            chunk = await f.read(chunk_size)
            if not chunk:
                break
            yield chunk
