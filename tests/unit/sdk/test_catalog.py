"""
Unit Tests for the Service Catalog.

Covers endpoint URL handling, token catalog processing, endpoint
resolution and the parsing of version discovery documents.
"""

import pytest

from ostack.core.exceptions import CatalogError, DiscoveryError
from ostack.sdk.catalog import Catalog, ServiceEndpoint, ServiceEndpoints, expand_link, parse_discovery
from ostack.sdk.types import ApiVersion, EntryStatus


# =============================================================================
# ServiceEndpoint
# =============================================================================


class TestServiceEndpoint:
    """Tests for endpoint URLs."""

    def test_version_from_url(self):
        assert ServiceEndpoint.from_url_string("https://compute.example/v2.1").version == ApiVersion(2, 1)

    def test_project_segment_remembered(self, fake_cloud):
        pid = fake_cloud.project_id
        endpoint = ServiceEndpoint.from_url_string(f"https://swift.example/v1/AUTH_{pid}", pid)
        assert endpoint.last_segment_with_project_id == f"AUTH_{pid}"
        assert endpoint.version == ApiVersion(1, 0)

    def test_relative_url_rejected(self):
        with pytest.raises(CatalogError):
            ServiceEndpoint.from_url_string("/v2.0")

    @pytest.mark.parametrize(
        ("base", "path", "expected"),
        [
            ("https://compute.example/v2.1", "servers/detail", "https://compute.example/v2.1/servers/detail"),
            ("https://compute.example/v2.1/", "v2.1/servers", "https://compute.example/v2.1/servers"),
            ("https://network.example", "v2.0/networks", "https://network.example/v2.0/networks"),
            ("https://network.example/", "", "https://network.example/"),
        ],
    )
    def test_build_request_url(self, base, path, expected):
        assert ServiceEndpoint(url=base).build_request_url(path) == expected

    def test_project_segment_added_back(self):
        endpoint = ServiceEndpoint(url="https://volume.example/v3/", last_segment_with_project_id="abc")
        assert endpoint.build_request_url("volumes/detail") == "https://volume.example/v3/abc/volumes/detail"


class TestServiceEndpoints:
    """Tests for version and region selection."""

    def endpoints(self):
        return ServiceEndpoints([
            ServiceEndpoint(url="https://c.example/v2/", version=ApiVersion(2, 0), status=EntryStatus.SUPPORTED, region="R1"),
            ServiceEndpoint(url="https://c.example/v2.1/", version=ApiVersion(2, 95), status=EntryStatus.CURRENT, region="R1"),
        ])

    def test_version_match_requires_same_major_and_newer_minor(self):
        assert self.endpoints().get_by_version_and_region(ApiVersion(2, 1)).url == "https://c.example/v2.1/"
        assert self.endpoints().get_by_version_and_region(ApiVersion(2, 0)).url == "https://c.example/v2/"
        assert self.endpoints().get_by_version_and_region(ApiVersion(3, 0)) is None

    def test_current_preferred_without_version(self):
        assert self.endpoints().get_by_version_and_region().url == "https://c.example/v2.1/"

    def test_region_filter(self):
        assert self.endpoints().get_by_version_and_region(ApiVersion(2, 1), "R2") is None
        assert self.endpoints().get_by_region("R2") is None
        assert self.endpoints().get_by_region().url == "https://c.example/v2/"


# =============================================================================
# Catalog
# =============================================================================


class TestCatalog:
    """Tests for token catalog processing and endpoint resolution."""

    @pytest.fixture
    def catalog(self, fake_cloud):
        catalog = Catalog()
        catalog.process_catalog_endpoints(fake_cloud.catalog(), "public", fake_cloud.project_id)
        return catalog

    def test_aliases_stored_under_official_type(self, catalog):
        assert "block-storage" in catalog.service_endpoints
        assert "volumev3" not in catalog.service_endpoints
        assert "container-infrastructure-management" in catalog.service_endpoints

    def test_interface_filter(self, catalog):
        endpoint = catalog.get_catalog_endpoint("network")
        assert endpoint.url == "https://network.example"
        assert endpoint.interface == "public"
        assert endpoint.region == "RegionOne"

    def test_legacy_interface_name(self, fake_cloud):
        catalog = Catalog()
        catalog.process_catalog_endpoints(fake_cloud.catalog(), "internalURL")
        assert catalog.get_catalog_endpoint("dns").url == "https://dns.example/internal"

    def test_official_name_wins_over_alias(self):
        catalog = Catalog()
        catalog.process_catalog_endpoints([
            {"type": "volumev3", "endpoints": [{"interface": "public", "url": "https://old.example/v3"}]},
            {"type": "block-storage", "endpoints": [{"interface": "public", "url": "https://new.example/v3"}]},
        ])
        assert catalog.get_catalog_endpoint("volume").url == "https://new.example/v3"

    def test_unknown_service_raises(self, catalog):
        with pytest.raises(CatalogError, match="baremetal"):
            catalog.get_service_endpoint("baremetal")

    def test_unversioned_catalog_endpoint_used_as_fallback(self, catalog):
        endpoint = catalog.get_service_endpoint("network", ApiVersion(2, 0), "RegionOne")
        assert endpoint.url == "https://network.example"

    def test_other_major_version_not_used(self, catalog):
        with pytest.raises(CatalogError, match="version 3.0"):
            catalog.get_service_endpoint("compute", ApiVersion(3, 0))

    def test_region_mismatch(self, catalog):
        with pytest.raises(CatalogError, match="RegionTwo"):
            catalog.get_service_endpoint("compute", ApiVersion(2, 1), "RegionTwo")

    def test_discovered_endpoints_take_precedence(self, catalog, fake_cloud):
        catalog.add_discovered("volume", [
            ServiceEndpoint(url="https://volume.example/v3/", version=ApiVersion(3, 70), status=EntryStatus.CURRENT),
        ])
        endpoint = catalog.get_service_endpoint("block-storage", ApiVersion(3, 0), "RegionOne")
        assert endpoint.url == "https://volume.example/v3/"
        assert endpoint.region == "RegionOne"
        assert endpoint.build_request_url("volumes") == f"https://volume.example/v3/{fake_cloud.project_id}/volumes"

    def test_override_wins(self, catalog):
        catalog.set_endpoint_overrides({"load_balancer_endpoint_override": "https://octavia.local/", "region_name": "x"})
        assert catalog.has_override("load-balancer")
        assert not catalog.discovery_allowed("load-balancer")
        assert catalog.get_service_endpoint("load-balancer", ApiVersion(2, 0)).url == "https://octavia.local/"

    def test_object_store_not_discovered(self, catalog):
        assert not catalog.discovery_allowed("object-store")
        assert catalog.discovery_allowed("compute")

    def test_reprocessing_resets_discovery(self, catalog, fake_cloud):
        catalog.add_discovered("compute", [ServiceEndpoint(url="https://compute.example/v2.1/")])
        catalog.process_catalog_endpoints(fake_cloud.catalog(fake_cloud.other_project_id))
        assert not catalog.is_discovered("compute")
        assert fake_cloud.other_project_id in catalog.get_catalog_endpoint("volume").url


# =============================================================================
# Discovery documents
# =============================================================================


class TestExpandLink:
    """Tests for normalizing version self links."""

    def test_host_taken_from_base(self):
        url = expand_link("http://10.0.0.5:9696/v2.0", "https://network.example/", "network")
        assert url == "https://network.example/v2.0/"

    def test_relative_link(self):
        assert expand_link("v2.0", "https://network.example/", "network") == "https://network.example/v2.0/"

    def test_invalid_port_keeps_path(self):
        url = expand_link("http://dns-api:${PORT}/v2/", "https://dns.example/", "dns")
        assert url == "https://dns.example/v2/"


class TestParseDiscovery:
    """Tests for the three version document shapes."""

    def test_versions_list(self):
        data = {"versions": [
            {"id": "v2.0", "status": "SUPPORTED", "version": "", "min_version": "",
             "links": [{"rel": "self", "href": "https://compute.example/v2/"}]},
            {"id": "v2.1", "status": "CURRENT", "version": "2.95", "min_version": "2.1",
             "links": [{"rel": "self", "href": "https://compute.example/v2.1/"}]},
        ]}
        endpoints = parse_discovery("https://compute.example/", data, "compute")
        assert [e.url for e in endpoints] == [
            "https://compute.example/", "https://compute.example/v2/", "https://compute.example/v2.1/",
        ]
        assert endpoints[0].version == ApiVersion()
        assert endpoints[1].version == ApiVersion(2, 0)
        assert endpoints[2].version == ApiVersion(2, 95)
        assert endpoints[2].max_version is None
        assert endpoints[2].min_version == "2.1"
        assert endpoints[2].status is EntryStatus.CURRENT

    def test_single_version(self):
        data = {"version": {"id": "v2.0", "status": "CURRENT",
                            "links": [{"rel": "self", "href": "https://network.example/v2.0/"}]}}
        endpoints = parse_discovery("https://network.example/v2.0/", data, "network")
        assert endpoints[-1].version == ApiVersion(2, 0)

    def test_identity_values(self):
        data = {"versions": {"values": [
            {"id": "v3.14", "status": "stable", "links": [{"rel": "self", "href": "https://identity.example/v3/"}]},
        ]}}
        endpoints = parse_discovery("https://identity.example/", data, "identity")
        assert endpoints[-1].version == ApiVersion(3, 14)
        assert endpoints[-1].status is EntryStatus.CURRENT

    def test_invalid_document(self):
        with pytest.raises(DiscoveryError):
            parse_discovery("https://x.example/", {"links": []}, "dns")

    def test_version_without_self_link(self):
        with pytest.raises(DiscoveryError, match="self link"):
            parse_discovery("https://x.example/", {"versions": [{"id": "v2", "links": []}]}, "dns")
