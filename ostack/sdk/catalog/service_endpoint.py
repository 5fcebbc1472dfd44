"""
Service Endpoints.

A ServiceEndpoint is one usable base URL of a service (from the token
catalog, from version discovery or from an endpoint override) together with
the API version it serves.
"""

from dataclasses import dataclass, field
from urllib.parse import urlsplit, urlunsplit

from ostack.core.exceptions import CatalogError, UrlBuildError
from ostack.sdk.types import ApiVersion, EntryStatus


@dataclass
class ServiceEndpoint:
    """Base URL of a service for one API version."""

    url: str
    version: ApiVersion = field(default_factory=ApiVersion)
    region: str | None = None
    interface: str | None = None
    min_version: str | None = None
    max_version: str | None = None
    service_type: str | None = None
    last_segment_with_project_id: str | None = None
    status: EntryStatus | None = None

    @classmethod
    def from_url_string(cls, url: str, project_id: str | None = None) -> "ServiceEndpoint":
        """
        Build an endpoint from a catalog URL.

        The API version is derived from the URL. When the last path segment
        carries the project id (e.g. ".../v3/AUTH_<project_id>") it is
        remembered so that request URLs keep it.

        Raises:
            CatalogError: If the URL is not an absolute http(s) URL
        """
        parts = urlsplit(url)
        if parts.scheme not in ("http", "https") or not parts.netloc:
            raise CatalogError(f"Endpoint URL `{url}` must be an absolute http/https URL")

        last_segment_with_project_id = None
        if project_id:
            segments = [s for s in parts.path.split("/") if s]
            if segments and segments[-1].endswith(project_id):
                last_segment_with_project_id = segments[-1]

        return cls(
            url=url,
            version=ApiVersion.from_url(url, project_id),
            last_segment_with_project_id=last_segment_with_project_id,
        )

    def build_request_url(self, endpoint: str) -> str:
        """
        Join a relative endpoint path to this base URL.

        The project segment is re-added when missing. Leading segments of the
        endpoint path that repeat the tail of the base path are dropped, so
        ".../v2.1/" + "v2.1/servers" gives ".../v2.1/servers".
        """
        try:
            parts = urlsplit(self.url)
        except ValueError as e:
            raise UrlBuildError(str(e)) from e

        segments = [s for s in parts.path.split("/") if s]
        pid_segment = self.last_segment_with_project_id
        if pid_segment and (not segments or segments[-1] != pid_segment):
            segments.append(pid_segment)

        work_segments = endpoint.lstrip("/").split("/") if endpoint else []
        overlap = False
        for part in segments:
            if work_segments and work_segments[0] == part:
                work_segments = work_segments[1:]
                overlap = True
            elif overlap:
                break

        base_path = "/" + "".join(f"{s}/" for s in segments)
        if work_segments:
            path = base_path + "/".join(work_segments)
        else:
            path = base_path.rstrip("/") or "/"
        return urlunsplit((parts.scheme, parts.netloc, path, "", ""))


class ServiceEndpoints:
    """All known endpoints of one service type."""

    def __init__(self, endpoints: list[ServiceEndpoint] | None = None) -> None:
        self._endpoints: list[ServiceEndpoint] = list(endpoints or [])

    def push(self, endpoint: ServiceEndpoint) -> "ServiceEndpoints":
        self._endpoints.append(endpoint)
        return self

    def get_all(self) -> list[ServiceEndpoint]:
        return list(self._endpoints)

    def __bool__(self) -> bool:
        return bool(self._endpoints)

    def __len__(self) -> int:
        return len(self._endpoints)

    def get_by_region(self, region: str | None = None) -> ServiceEndpoint | None:
        """First endpoint in the region, or the first endpoint when no region is requested."""
        if region is None:
            return self._endpoints[0] if self._endpoints else None
        for endpoint in self._endpoints:
            if endpoint.region == region:
                return endpoint
        return None

    def get_by_version_and_region(
        self, version: ApiVersion | None = None, region: str | None = None,
    ) -> ServiceEndpoint | None:
        """
        Select the endpoint serving a version in a region.

        A requested version matches candidates with the same major and an
        equal or newer minor version. Without a version, CURRENT endpoints are
        preferred and the region lookup is the fallback.
        """
        for candidate in self._endpoints:
            if version is not None:
                if not (
                    candidate.version.major == version.major
                    and candidate.version.minor >= version.minor
                ):
                    continue
            elif candidate.status != EntryStatus.CURRENT:
                continue

            if region is None or candidate.region == region:
                return candidate

        if version is None:
            return self.get_by_region(region)
        return None
