"""Service catalog, endpoint discovery and endpoint resolution."""

from ostack.sdk.catalog.catalog import Catalog
from ostack.sdk.catalog.discovery import EndpointVersion, discover, expand_link, parse_discovery
from ostack.sdk.catalog.service_endpoint import ServiceEndpoint, ServiceEndpoints

__all__ = [
    "Catalog",
    "EndpointVersion",
    "ServiceEndpoint",
    "ServiceEndpoints",
    "discover",
    "expand_link",
    "parse_discovery",
]
