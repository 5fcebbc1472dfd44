"""
Service Catalog.

Holds the endpoints of every service known to the session: the token
catalog returned by Keystone, endpoint overrides from the cloud config and
endpoints found by version discovery.

Usage:
    catalog = Catalog()
    catalog.process_catalog_endpoints(token.catalog, interface="public", project_id=pid)
    catalog.set_endpoint_overrides(cloud_config.options, pid)

    endpoint = catalog.get_service_endpoint("network", ApiVersion(2, 0), "RegionOne")
    endpoint.build_request_url("v2.0/networks")
"""

from typing import Any

from ostack.core.exceptions import CatalogError
from ostack.core.logging import get_logger, log_with_source
from ostack.sdk.catalog.service_endpoint import ServiceEndpoint, ServiceEndpoints
from ostack.sdk.service_authority import get_service_authority
from ostack.sdk.types import ApiVersion, ServiceType

logger = get_logger(__name__)

ENDPOINT_OVERRIDE_SUFFIX = "_endpoint_override"

# Services whose catalog endpoint is used without version discovery
NO_DISCOVERY_SERVICES = frozenset({ServiceType.OBJECT_STORE.value})


class Catalog:
    """Endpoints per official service type."""

    def __init__(self) -> None:
        self.service_endpoints: dict[str, ServiceEndpoints] = {}
        self.discovered: dict[str, ServiceEndpoints] = {}
        self.endpoint_overrides: dict[str, ServiceEndpoint] = {}
        self.token_catalog: list[dict[str, Any]] = []

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def process_catalog_endpoints(
        self,
        catalog: list[dict[str, Any]] | None,
        interface: str | None = "public",
        project_id: str | None = None,
    ) -> None:
        """
        Register the endpoints of a token catalog.

        Entries registered under an alias ("volumev3") are stored under the
        official type ("block-storage"). When several entries map to the same
        official type the official name wins, then the aliases in order.

        Args:
            catalog: "catalog" list of a Keystone token
            interface: Endpoint interface to keep ("public", "internal",
                "admin"; the legacy "publicURL" form is accepted)
            project_id: Project the token is scoped to
        """
        self.token_catalog = list(catalog or [])
        self.service_endpoints = {}
        self.discovered = {}

        if interface and interface.endswith("URL"):
            interface = interface[: -len("URL")]

        authority = get_service_authority()
        selected: dict[str, tuple[int, dict[str, Any]]] = {}
        for entry in self.token_catalog:
            catalog_type = entry.get("type")
            if not catalog_type:
                continue
            official = authority.get_official_type(catalog_type)
            try:
                priority = authority.get_all_types_by_service_type(official).index(catalog_type)
            except (KeyError, ValueError):
                priority = 0
            current = selected.get(official)
            if current is None or priority < current[0]:
                selected[official] = (priority, entry)

        for official, (_, entry) in selected.items():
            endpoints = ServiceEndpoints()
            for raw in entry.get("endpoints") or []:
                if interface and raw.get("interface") != interface:
                    continue
                url = raw.get("url")
                if not url:
                    continue
                endpoint = ServiceEndpoint.from_url_string(url, project_id)
                endpoint.region = raw.get("region_id") or raw.get("region")
                endpoint.interface = raw.get("interface")
                endpoint.service_type = official
                endpoints.push(endpoint)
            if endpoints:
                self.service_endpoints[official] = endpoints

        log_with_source(
            logger,
            "catalog",
            "debug",
            "Processed token catalog",
            services=sorted(self.service_endpoints),
            interface=interface,
        )

    def register_catalog_endpoint(
        self,
        service_type: str,
        url: str,
        region: str | None = None,
        interface: str | None = None,
    ) -> None:
        """Add an endpoint as if it came from the token catalog (e.g. the auth URL)."""
        official = get_service_authority().get_official_type(service_type)
        endpoint = ServiceEndpoint.from_url_string(url)
        endpoint.region = region
        endpoint.interface = interface
        endpoint.service_type = official
        self.service_endpoints.setdefault(official, ServiceEndpoints()).push(endpoint)

    def register_endpoint_override(
        self, service_type: str, url: str, project_id: str | None = None,
    ) -> None:
        official = get_service_authority().get_official_type(service_type)
        endpoint = ServiceEndpoint.from_url_string(url, project_id)
        endpoint.service_type = official
        self.endpoint_overrides[official] = endpoint
        log_with_source(
            logger, "catalog", "debug", "Registered endpoint override",
            service_type=official, url=url,
        )

    def set_endpoint_overrides(self, options: dict[str, Any], project_id: str | None = None) -> None:
        """Register every "<service_type>_endpoint_override" option of a cloud config."""
        for key, value in options.items():
            if key.endswith(ENDPOINT_OVERRIDE_SUFFIX) and isinstance(value, str) and value:
                service_type = key[: -len(ENDPOINT_OVERRIDE_SUFFIX)].replace("_", "-")
                self.register_endpoint_override(service_type, value, project_id)

    def add_discovered(self, service_type: str, endpoints: list[ServiceEndpoint]) -> None:
        """
        Record endpoints found by version discovery.

        The region and the project segment of the catalog endpoint the
        discovery started from are carried over.
        """
        official = get_service_authority().get_official_type(service_type)
        source = self.service_endpoints.get(official)
        origin = source.get_by_region() if source else None
        discovered = ServiceEndpoints()
        for endpoint in endpoints:
            if origin is not None:
                endpoint.region = endpoint.region or origin.region
                endpoint.interface = endpoint.interface or origin.interface
                endpoint.last_segment_with_project_id = origin.last_segment_with_project_id
            endpoint.service_type = official
            discovered.push(endpoint)
        self.discovered[official] = discovered

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def has_override(self, service_type: str) -> bool:
        return get_service_authority().get_official_type(service_type) in self.endpoint_overrides

    def is_discovered(self, service_type: str) -> bool:
        return get_service_authority().get_official_type(service_type) in self.discovered

    def discovery_allowed(self, service_type: str) -> bool:
        official = get_service_authority().get_official_type(service_type)
        return official not in self.endpoint_overrides and official not in NO_DISCOVERY_SERVICES

    def get_catalog_endpoint(
        self, service_type: str, region: str | None = None,
    ) -> ServiceEndpoint | None:
        """Catalog endpoint of a service (the discovery starting point)."""
        official = get_service_authority().get_official_type(service_type)
        if official in self.endpoint_overrides:
            return self.endpoint_overrides[official]
        endpoints = self.service_endpoints.get(official)
        return endpoints.get_by_region(region) if endpoints else None

    def get_service_endpoint(
        self,
        service_type: str,
        version: ApiVersion | None = None,
        region: str | None = None,
    ) -> ServiceEndpoint:
        """
        Resolve the endpoint to send a request to.

        Resolution order: endpoint override, discovered endpoints, catalog
        endpoints. When a version was requested and no endpoint declares it,
        the catalog endpoint is still used if its URL is unversioned or has
        the same major version.

        Raises:
            CatalogError: If no endpoint matches
        """
        official = get_service_authority().get_official_type(service_type)

        override = self.endpoint_overrides.get(official)
        if override is not None:
            return override

        for source in (self.discovered, self.service_endpoints):
            endpoints = source.get(official)
            if endpoints:
                endpoint = endpoints.get_by_version_and_region(version, region)
                if endpoint is not None:
                    return endpoint

        catalog_endpoints = self.service_endpoints.get(official)
        if version is not None and catalog_endpoints:
            fallback = catalog_endpoints.get_by_region(region)
            if fallback is not None and fallback.version.major in (0, version.major):
                return fallback

        details = f"Service endpoint for `{official}`"
        if version is not None:
            details += f" version {version}"
        if region is not None:
            details += f" in region `{region}`"
        raise CatalogError(f"{details} cannot be found")

    def get_token_catalog(self) -> list[dict[str, Any]]:
        return list(self.token_catalog)
