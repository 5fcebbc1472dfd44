"""
Endpoint Version Discovery.

Parses service version documents into ServiceEndpoints. Three document
shapes are in use across OpenStack services:

    {"versions": [{...}, ...]}             (most services)
    {"version": {...}}                     (a single versioned root)
    {"versions": {"values": [{...}]}}      (identity)

Usage:
    endpoints = await discover(session, "compute", "https://nova.example.com/v2.1")
"""

import re
from typing import TYPE_CHECKING, Any
from urllib.parse import urljoin, urlsplit, urlunsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ostack.core.exceptions import ClientError, DiscoveryError
from ostack.core.logging import get_logger, log_with_source
from ostack.sdk.catalog.service_endpoint import ServiceEndpoint
from ostack.sdk.types import ApiVersion, EntryStatus, ServiceType

if TYPE_CHECKING:
    from ostack.sdk.session import AsyncOpenStack

logger = get_logger(__name__)

LINK_WITH_PORT_RE = re.compile(r"^(?P<scheme>.+)://(?P<host>[^:/]+):(?P<port>[^/]+)/(?P<path>.*)$")


class Link(BaseModel):
    model_config = ConfigDict(extra="allow")

    href: str
    rel: str


class EndpointVersion(BaseModel):
    """One entry of a version discovery document."""

    model_config = ConfigDict(extra="allow")

    id: str
    status: EntryStatus = EntryStatus.UNKNOWN
    links: list[Link] = Field(default_factory=list)
    version: str | None = None
    min_version: str | None = None
    max_version: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, value: Any) -> EntryStatus:
        return EntryStatus.from_str(value if isinstance(value, str) else None)

    @field_validator("version", "min_version", "max_version", mode="before")
    @classmethod
    def _empty_as_none(cls, value: Any) -> Any:
        return value or None

    def get_api_version(self) -> ApiVersion:
        if self.version:
            return ApiVersion.from_str(self.version, prefixed=False)
        if self.min_version:
            return ApiVersion.from_str(self.min_version, prefixed=False)
        return ApiVersion.from_str(self.id, prefixed=True)

    def as_endpoint(self, base_url: str, service_type: str) -> ServiceEndpoint:
        self_link = next((link for link in self.links if link.rel == "self"), None)
        if self_link is None:
            raise DiscoveryError(service_type, base_url, f"Version `{self.id}` has no self link")
        try:
            url = expand_link(self_link.href, base_url, service_type)
        except ValueError as e:
            log_with_source(
                logger,
                "catalog",
                "error",
                "Service version discovery error, using catalog endpoint. "
                "Consider setting an endpoint override.",
                service_type=service_type,
                error=str(e),
            )
            url = base_url
        try:
            version = self.get_api_version()
        except ValueError as e:
            raise DiscoveryError(service_type, base_url, str(e)) from e
        return ServiceEndpoint(
            url=url,
            version=version,
            min_version=self.min_version,
            max_version=self.max_version,
            status=self.status,
            service_type=service_type,
        )


def expand_link(link: str, base_url: str, service_type: str) -> str:
    """
    Normalize a version "self" link against the URL it was discovered at.

    Scheme, host and port are taken from base_url (services behind proxies
    often advertise internal addresses). The result ends with "/".

    Raises:
        ValueError: If the link cannot be interpreted
    """
    parts = urlsplit(link)
    try:
        parts.port
        invalid_port = False
    except ValueError:
        invalid_port = True

    if invalid_port:
        log_with_source(
            logger,
            "catalog",
            "error",
            "Service version discovery misconfiguration: invalid port, only the path is used",
            service_type=service_type,
            url=link,
        )
        match = LINK_WITH_PORT_RE.match(link)
        if match is None:
            raise ValueError(f"Cannot determine the path of `{link}`")
        parts = urlsplit(urljoin(base_url, match["path"]))
    elif not parts.scheme or not parts.netloc:
        log_with_source(
            logger,
            "catalog",
            "warning",
            "Service version discovery misconfiguration: link without a base",
            service_type=service_type,
            url=link,
        )
        parts = urlsplit(urljoin(base_url, link))

    base = urlsplit(base_url)
    path = parts.path if parts.path.endswith("/") else parts.path + "/"
    return urlunsplit((base.scheme, base.netloc, path, "", ""))


def _extract_versions(data: Any) -> list[Any] | None:
    if not isinstance(data, dict):
        return None
    versions = data.get("versions")
    if isinstance(versions, list):
        return versions
    if isinstance(data.get("version"), dict):
        return [data["version"]]
    if isinstance(versions, dict) and isinstance(versions.get("values"), list):
        return versions["values"]
    return None


def parse_discovery(discovery_url: str, data: Any, service_type: str) -> list[ServiceEndpoint]:
    """
    Turn a version document into endpoints.

    The discovery URL itself is always the first endpoint (version 0.0).

    Raises:
        DiscoveryError: If the document has none of the known shapes
    """
    versions = _extract_versions(data)
    if versions is None:
        raise DiscoveryError(service_type, discovery_url, "Invalid discovery document")

    endpoints = [ServiceEndpoint(url=discovery_url, version=ApiVersion(), service_type=service_type)]
    for raw in versions:
        try:
            version = EndpointVersion.model_validate(raw)
        except ValidationError as e:
            raise DiscoveryError(service_type, discovery_url, f"Invalid version entry: {e}") from e
        endpoints.append(version.as_endpoint(discovery_url, service_type))
    return endpoints


MAX_DISCOVERY_LEVELS = 10


async def discover(session: "AsyncOpenStack", service_type: str, url: str) -> list[ServiceEndpoint]:
    """
    Fetch and parse the version document of a service.

    Starts at url and walks up the path one segment at a time (at most
    MAX_DISCOVERY_LEVELS requests) until a document parses.

    Raises:
        DiscoveryError: If no level returns a usable document
    """
    parts = urlsplit(url)
    segments = [s for s in parts.path.split("/") if s]
    last_error = "no version document found"

    for _ in range(MAX_DISCOVERY_LEVELS):
        path = "/" + "".join(f"{s}/" for s in segments)
        candidate = urlunsplit((parts.scheme, parts.netloc, path, "", ""))
        log_with_source(
            logger, "catalog", "debug", "Discovering service versions",
            service_type=service_type, url=candidate,
        )
        try:
            response = await session.rest("GET", candidate, headers={"Accept": "application/json"})
        except ClientError as e:
            raise DiscoveryError(service_type, candidate, e.message) from e

        if response.is_success or response.status_code == 300:
            try:
                return parse_discovery(candidate, response.json(), service_type)
            except (ValueError, DiscoveryError) as e:
                last_error = str(e)
        else:
            last_error = f"status {response.status_code}"

        if not segments:
            break
        segments.pop()

    if service_type == ServiceType.IDENTITY.value:
        raise DiscoveryError(service_type, url, "Service is not working.")
    raise DiscoveryError(service_type, url, last_error)
