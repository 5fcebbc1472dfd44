"""
Unit Tests for the Request Machinery.

Request building (RestEndpoint), response processing, the paged and find
combinators and streamed up/downloads, run against FakeCloud.
"""

import io
import json

import httpx
import pytest
from pydantic import ValidationError

from ostack.core.exceptions import (
    ClientError,
    DataTypeError,
    IdNotUniqueError,
    OpenStackError,
    PaginationError,
    ResourceNotFoundError,
    UrlBuildError,
)
from ostack.sdk.api import Findable, Pagination, find, ignore, paged
from ostack.sdk.api.compute.servers import ListServers, LockServer, RebootServer, RebootType, StopServer
from ostack.sdk.api.container_infra.clusters import find_cluster
from ostack.sdk.api.image.images import SetImage
from ostack.sdk.api.network.networks import (
    CreateNetwork,
    DeleteNetwork,
    GetNetwork,
    ListNetworks,
    Network,
    find_network,
)
from ostack.sdk.api.object_store.objects import CreateContainer, DownloadObject, GetContainer, GetObject, UploadObject
from ostack.sdk.api.paged import next_page_from_body
from ostack.sdk.types import ApiVersion

NETWORKS = "https://network.example/v2.0/networks"
SERVERS = "https://compute.example/v2.1/servers/detail"


# =============================================================================
# Request building
# =============================================================================


class TestRequestBuilding:
    """Tests for URL, query, header and body construction."""

    def test_path_parameters_are_quoted(self):
        assert GetNetwork(id="a b/c").endpoint() == "v2.0/networks/a%20b%2Fc"

    def test_raw_path_field_keeps_slashes(self):
        ep = GetObject(container="c", object_name="dir/file 1.txt")
        assert ep.endpoint() == "c/dir/file%201.txt"

    def test_empty_path_parameter(self):
        with pytest.raises(UrlBuildError, match="id"):
            GetNetwork(id="").endpoint()

    def test_unknown_field_rejected(self):
        with pytest.raises(ValidationError):
            ListNetworks(bogus=1)

    def test_api_version(self):
        assert ListNetworks().api_version() == ApiVersion(2, 0)
        assert ListServers().api_version() is None
        assert LockServer(id="s1").api_version() == ApiVersion(2, 73)

    def test_query_parameters(self):
        ep = ListNetworks(external=True, tags=["a", "b"], sort_key=["name", "id"], limit=5)
        assert ep.parameters().items() == [
            ("router:external", "true"),
            ("limit", "5"),
            ("sort_key", "name"),
            ("sort_key", "id"),
            ("tags", "a,b"),
        ]

    def test_microversion_headers(self):
        headers = LockServer(id="s1").request_headers()
        assert headers["OpenStack-API-Version"] == "compute 2.73"

    def test_header_fields(self):
        assert CreateContainer(container="c", storage_policy="gold").request_headers() == {"X-Storage-Policy": "gold"}

    def test_json_body_uses_aliases(self):
        content_type, body = CreateNetwork(name="n1", external=True).body()
        assert content_type == "application/json"
        assert json.loads(body) == {"network": {"name": "n1", "router:external": True}}

    def test_no_body_for_get_and_delete(self):
        assert GetNetwork(id="x").body() is None
        assert DeleteNetwork(id="x").body() is None

    def test_action_bodies(self):
        assert json.loads(StopServer(id="s1").body()[1]) == {"os-stop": None}
        assert json.loads(RebootServer(id="s1", reboot_type=RebootType.HARD).body()[1]) == {"reboot": {"type": "HARD"}}
        assert json.loads(LockServer(id="s1", locked_reason="maint").body()[1]) == {"lock": {"locked_reason": "maint"}}

    def test_image_json_patch(self):
        ep = SetImage(id="i1", name="new", properties={"os_distro": "ubuntu"}, remove_properties=["old"])
        content_type, body = ep.body()
        assert content_type == "application/openstack-images-v2.1-json-patch"
        assert json.loads(body) == [
            {"op": "replace", "path": "/name", "value": "new"},
            {"op": "add", "path": "/os_distro", "value": "ubuntu"},
            {"op": "remove", "path": "/old"},
        ]


# =============================================================================
# Query
# =============================================================================


class TestQuery:
    """Tests for sending requests and processing responses."""

    @pytest.mark.asyncio
    async def test_query_returns_response_key(self, fake_cloud):
        fake_cloud.add("GET", NETWORKS + "/n1", json={"network": {"id": "n1", "name": "web"}})
        session = await fake_cloud.connect()

        assert await GetNetwork(id="n1").query(session) == {"id": "n1", "name": "web"}

        request = fake_cloud.requests_to("GET", NETWORKS)[-1]
        assert request.headers["X-Auth-Token"] == "token-1"
        assert request.headers["Accept"] == "application/json"
        await session.close()

    @pytest.mark.asyncio
    async def test_query_typed(self, fake_cloud):
        fake_cloud.add("GET", NETWORKS + "/n1", json={"network": {"id": "n1", "name": "web", "mtu": 1450}})
        session = await fake_cloud.connect()
        network = await GetNetwork(id="n1").query_typed(session, Network)
        assert isinstance(network, Network)
        assert network.id == "n1"
        assert network.name == "web"
        await session.close()

    @pytest.mark.asyncio
    async def test_query_typed_mismatch(self, fake_cloud):
        fake_cloud.add("GET", NETWORKS + "/n1", json={"network": {"name": "no id"}})
        session = await fake_cloud.connect()
        with pytest.raises(DataTypeError, match="Network"):
            await GetNetwork(id="n1").query_typed(session, Network)
        await session.close()

    @pytest.mark.asyncio
    async def test_not_found(self, fake_cloud):
        session = await fake_cloud.connect()
        with pytest.raises(ResourceNotFoundError):
            await GetNetwork(id="missing").query(session)
        await session.close()

    @pytest.mark.asyncio
    async def test_error_message_extracted(self, fake_cloud):
        fake_cloud.add("POST", NETWORKS, status=409, json={"NeutronError": {"message": "Quota exceeded"}})
        session = await fake_cloud.connect()
        with pytest.raises(OpenStackError, match="Quota exceeded"):
            await CreateNetwork(name="n").query(session)
        await session.close()

    @pytest.mark.asyncio
    async def test_response_headers_injected(self, fake_cloud):
        url = f"https://swift.example/v1/AUTH_{fake_cloud.project_id}/photos"
        fake_cloud.add("HEAD", url, status=204, headers={"X-Container-Object-Count": "3", "X-Storage-Policy": "gold"})
        session = await fake_cloud.connect()
        info = await GetContainer(container="photos").query(session)
        assert info == {"object_count": "3", "storage_policy": "gold"}
        await session.close()

    @pytest.mark.asyncio
    async def test_ignore_checks_status(self, fake_cloud):
        fake_cloud.add("DELETE", NETWORKS + "/n1", status=204)
        session = await fake_cloud.connect()
        assert await ignore(DeleteNetwork(id="n1")).query(session) is None
        with pytest.raises(ResourceNotFoundError):
            await ignore(DeleteNetwork(id="n2")).query(session)
        await session.close()

    @pytest.mark.asyncio
    async def test_download_streams_into_sink(self, fake_cloud):
        url = f"https://swift.example/v1/AUTH_{fake_cloud.project_id}/c/dir/a.txt"
        fake_cloud.add("GET", url, content=b"hello world", headers={"Content-Type": "text/plain"})
        session = await fake_cloud.connect()
        sink = io.BytesIO()
        headers = await DownloadObject(container="c", object_name="dir/a.txt").download(session, sink)
        assert sink.getvalue() == b"hello world"
        assert headers["Content-Type"] == "text/plain"
        await session.close()

    @pytest.mark.asyncio
    async def test_upload_streams_file(self, fake_cloud, tmp_path):
        source = tmp_path / "data.bin"
        source.write_bytes(b"\x00\x01" * 1000)
        url = f"https://swift.example/v1/AUTH_{fake_cloud.project_id}/c/data.bin"
        fake_cloud.add("PUT", url, status=201)
        session = await fake_cloud.connect()
        await ignore(UploadObject(container="c", object_name="data.bin", file=str(source))).query(session)

        request = fake_cloud.requests_to("PUT", url)[0]
        assert request.content == b"\x00\x01" * 1000
        assert request.headers["Content-Type"] == "application/octet-stream"
        await session.close()


# =============================================================================
# Pagination
# =============================================================================


class TestNextPage:
    """Tests for next link resolution."""

    def test_links_entry(self):
        content = {"networks_links": [{"rel": "next", "href": NETWORKS + "?marker=n2"}]}
        assert next_page_from_body(content, "networks", NETWORKS) == NETWORKS + "?marker=n2"

    def test_relative_next(self):
        url = next_page_from_body({"next": "/v2/images?marker=i2"}, "images", "https://image.example/v2/images")
        assert url == "https://image.example:443/v2/images?marker=i2"

    def test_keystone_links_dict(self):
        assert next_page_from_body({"links": {"next": None, "self": "x"}}, "projects", "https://k/v3") is None

    def test_missing_rel(self):
        with pytest.raises(PaginationError):
            next_page_from_body({"links": [{"href": "x"}]}, "zones", "https://dns.example/v2/zones")

    def test_pagination_limit_must_be_positive(self):
        with pytest.raises(ValueError):
            Pagination.limit(0)


class TestPaged:
    """Tests for the paged combinator."""

    @pytest.mark.asyncio
    async def test_follows_next_links(self, fake_cloud):
        fake_cloud.add("GET", NETWORKS + "?limit=2", json={
            "networks": [{"id": "n1"}, {"id": "n2"}],
            "networks_links": [{"rel": "next", "href": NETWORKS + "?limit=2&marker=n2"}],
        })
        fake_cloud.add("GET", NETWORKS + "?limit=2&marker=n2", json={"networks": [{"id": "n3"}]})
        session = await fake_cloud.connect()

        items = await paged(ListNetworks(), Pagination.all(), page_size=2).query(session)
        assert [i["id"] for i in items] == ["n1", "n2", "n3"]
        await session.close()

    @pytest.mark.asyncio
    async def test_marker_fallback_on_full_pages(self, fake_cloud):
        fake_cloud.add("GET", SERVERS + "?limit=2", json={"servers": [{"id": "s1"}, {"id": "s2"}]})
        fake_cloud.add("GET", SERVERS + "?limit=2&marker=s2", json={"servers": [{"id": "s3"}]})
        session = await fake_cloud.connect()

        items = await paged(ListServers(), page_size=2).query(session)
        assert [i["id"] for i in items] == ["s1", "s2", "s3"]
        await session.close()

    @pytest.mark.asyncio
    async def test_max_items_truncates_and_stops(self, fake_cloud):
        fake_cloud.add("GET", SERVERS + "?limit=2", json={"servers": [{"id": "s1"}, {"id": "s2"}]})
        fake_cloud.add("GET", SERVERS + "?limit=2&marker=s2", json={"servers": [{"id": "s3"}, {"id": "s4"}]})
        session = await fake_cloud.connect()

        items = await paged(ListServers(), Pagination.limit(3), page_size=2).query(session)
        assert [i["id"] for i in items] == ["s1", "s2", "s3"]
        assert len(fake_cloud.requests_to("GET", SERVERS)) == 2
        await session.close()

    @pytest.mark.asyncio
    async def test_partial_page_ends_listing(self, fake_cloud):
        fake_cloud.add("GET", SERVERS + "?limit=5", json={"servers": [{"id": "s1"}]})
        session = await fake_cloud.connect()
        items = [item async for item in paged(ListServers(), page_size=5).iter(session)]
        assert items == [{"id": "s1"}]
        await session.close()

    @pytest.mark.asyncio
    async def test_non_list_response(self, fake_cloud):
        fake_cloud.add("GET", NETWORKS, json={"networks": {"id": "n1"}})
        session = await fake_cloud.connect()
        with pytest.raises(PaginationError):
            await paged(ListNetworks()).query(session)
        await session.close()


# =============================================================================
# Find
# =============================================================================


class TestFind:
    """Tests for lookup by id with the name fallback."""

    @pytest.mark.asyncio
    async def test_found_by_id(self, fake_cloud):
        fake_cloud.add("GET", NETWORKS + "/n1", json={"network": {"id": "n1"}})
        session = await fake_cloud.connect()
        assert await find(find_network("n1")).query(session) == {"id": "n1"}
        assert fake_cloud.requests_to("GET", NETWORKS + "?") == []
        await session.close()

    @pytest.mark.asyncio
    async def test_falls_back_to_name(self, fake_cloud):
        fake_cloud.add("GET", NETWORKS + "?name=web", json={"networks": [{"id": "n1", "name": "web"}]})
        session = await fake_cloud.connect()
        assert await find(find_network("web")).query(session) == {"id": "n1", "name": "web"}
        await session.close()

    @pytest.mark.asyncio
    async def test_name_not_unique(self, fake_cloud):
        fake_cloud.add("GET", NETWORKS + "?name=web", json={"networks": [{"id": "n1"}, {"id": "n2"}]})
        session = await fake_cloud.connect()
        with pytest.raises(IdNotUniqueError):
            await find(find_network("web")).query(session)
        await session.close()

    @pytest.mark.asyncio
    async def test_name_not_found(self, fake_cloud):
        fake_cloud.add("GET", NETWORKS + "?name=web", json={"networks": []})
        session = await fake_cloud.connect()
        with pytest.raises(ResourceNotFoundError):
            await find(find_network("web")).query(session)
        await session.close()

    @pytest.mark.asyncio
    async def test_client_side_name_filter(self, fake_cloud):
        fake_cloud.add("GET", "https://magnum.example/v1/clusters", json={"clusters": [
            {"uuid": "c1", "name": "k8s"}, {"uuid": "c2", "name": "other"},
        ]})
        session = await fake_cloud.connect()
        assert (await find(find_cluster("k8s")).query(session))["uuid"] == "c1"
        await session.close()

    def test_locate_in_list(self):
        findable = Findable(GetNetwork(id="x"), ListNetworks(), name="x")
        assert findable.locate_resource_in_list([{"name": "x"}, {"name": "y"}]) == {"name": "x"}


class TestTransportErrors:
    """Tests for transport failures."""

    @pytest.mark.asyncio
    async def test_connect_error_becomes_client_error(self, fake_cloud):
        def refuse(request):
            raise httpx.ConnectError("connection refused", request=request)

        fake_cloud.add("GET", NETWORKS + "/n1", responder=refuse)
        session = await fake_cloud.connect()
        with pytest.raises(ClientError, match="connection refused"):
            await GetNetwork(id="n1").query(session)
        await session.close()
