"""
Common SDK Types.

ServiceType, ApiVersion and EntryStatus shared by the catalog, the endpoint
layer and the CLI.
"""

import re
from dataclasses import dataclass
from enum import Enum
from urllib.parse import urlparse

from ostack.sdk.service_authority import get_service_authority

API_VERSION_PREFIXED_RE = re.compile(r"^v(?P<major>[0-9]+)(?:\.(?P<minor>[0-9]+))?$")
API_VERSION_RE = re.compile(r"^(?P<major>[0-9]+)(?:\.(?P<minor>[0-9]+))?$")
ID_LIKE_RE = re.compile(r"[0-9a-z]{32}$")


class ServiceType(str, Enum):
    """Official types of the services the toolkit has bindings for."""

    BLOCK_STORAGE = "block-storage"
    COMPUTE = "compute"
    CONTAINER_INFRASTRUCTURE_MANAGEMENT = "container-infrastructure-management"
    DNS = "dns"
    IDENTITY = "identity"
    IMAGE = "image"
    LOAD_BALANCER = "load-balancer"
    NETWORK = "network"
    OBJECT_STORE = "object-store"
    PLACEMENT = "placement"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_str(cls, value: str) -> "ServiceType":
        """
        Resolve a service type or one of its aliases.

        Raises:
            ValueError: If the type is not one of the supported services
        """
        return cls(get_service_authority().get_official_type(value))


MICROVERSION_SERVICE_NAMES = {
    ServiceType.BLOCK_STORAGE: "volume",
    ServiceType.COMPUTE: "compute",
    ServiceType.PLACEMENT: "placement",
}


@dataclass(frozen=True, order=True)
class ApiVersion:
    """API version (major.minor). Also used for microversions."""

    major: int = 0
    minor: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"

    @classmethod
    def from_str(cls, value: str, prefixed: bool | None = None) -> "ApiVersion":
        """
        Parse "v2.1", "2.1", "v3" or "3".

        Args:
            value: Version string
            prefixed: True to require the "v" prefix, False to forbid it,
                None to accept both

        Raises:
            ValueError: If the value does not look like a version
        """
        patterns = {
            True: (API_VERSION_PREFIXED_RE,),
            False: (API_VERSION_RE,),
            None: (API_VERSION_PREFIXED_RE, API_VERSION_RE),
        }[prefixed]
        for pattern in patterns:
            match = pattern.match(value)
            if match:
                return cls(int(match["major"]), int(match["minor"] or 0))
        raise ValueError(f"String {value} does not look like a supported version.")

    @classmethod
    def from_url(cls, url: str, project_id: str | None = None) -> "ApiVersion":
        """
        Determine the API version from an endpoint URL.

        A trailing project segment (ending with project_id, or id-like when no
        project id is known) is skipped. The last remaining segment is parsed
        as "vX[.Y]". Returns 0.0 when it is not a version.
        """
        segments = [s for s in urlparse(url).path.split("/") if s]
        if segments:
            last = segments[-1]
            if project_id is not None:
                if last.endswith(project_id):
                    segments.pop()
            elif ID_LIKE_RE.search(last):
                segments.pop()
        if segments:
            try:
                return cls.from_str(segments[-1], prefixed=True)
            except ValueError:
                pass
        return cls()

    @classmethod
    def from_endpoint_path(cls, path: str) -> "ApiVersion | None":
        """Version from the first segment of a relative path ("v2.0/networks" → 2.0)."""
        prefix, sep, _ = path.partition("/")
        if not sep:
            return None
        try:
            return cls.from_str(prefix, prefixed=True)
        except ValueError:
            return None

    def microversion_headers(self, service_type: ServiceType | str) -> dict[str, str]:
        """
        Headers requesting this microversion from a service.

        Only block-storage, compute and placement understand microversions;
        an empty dict is returned for others and for major version 0.
        """
        if self.major == 0:
            return {}
        try:
            service_type = ServiceType(service_type)
        except ValueError:
            return {}
        name = MICROVERSION_SERVICE_NAMES.get(service_type)
        if name is None:
            return {}
        headers = {"OpenStack-API-Version": f"{name} {self}"}
        if service_type is ServiceType.COMPUTE:
            headers["X-OpenStack-Nova-API-Version"] = str(self)
        return headers


class EntryStatus(str, Enum):
    """Status of an API version in a discovery document."""

    CURRENT = "CURRENT"
    SUPPORTED = "SUPPORTED"
    DEPRECATED = "DEPRECATED"
    EXPERIMENTAL = "EXPERIMENTAL"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def from_str(cls, value: str | None) -> "EntryStatus":
        if not value:
            return cls.UNKNOWN
        normalized = value.upper()
        if normalized == "STABLE":
            return cls.CURRENT
        try:
            return cls(normalized)
        except ValueError:
            return cls.UNKNOWN
