"""
Unit Tests for the Cloud Worker.

The worker connects to the clouds of clouds_file through FakeCloud.
"""

from datetime import timedelta

import pytest

from ostack.core.exceptions import AuthError, CloudNotFoundError, ConfigError
from ostack.sdk.auth import AuthState
from ostack.sdk.config import ConfigFile
from ostack.tui.requests import build_request
from ostack.tui.worker import ConnectionInfo, CloudWorker

SERVERS_URL = "https://compute.example/v2.1/servers/detail"
AUTH_PROJECTS_URL = "https://identity.example/v3/auth/projects"


@pytest.fixture
def worker(fake_cloud, clouds_file):
    return CloudWorker(
        config_file=ConfigFile.from_sources([clouds_file]),
        expiration_offset=timedelta(minutes=1),
        transport=fake_cloud.transport,
    )


class TestConnection:
    """Tests for connecting to clouds."""

    def test_list_clouds(self, worker):
        assert worker.list_clouds() == ["broken", "devstack"]

    @pytest.mark.asyncio
    async def test_connect(self, worker):
        info = await worker.connect_to_cloud("devstack")
        assert worker.connected
        assert info == ConnectionInfo(
            cloud="devstack", project="demo", domain="Default", region="RegionOne", token_state=AuthState.VALID,
        )
        await worker.close()
        assert not worker.connected

    @pytest.mark.asyncio
    async def test_failed_connect_keeps_previous_session(self, worker):
        await worker.connect_to_cloud("devstack")
        with pytest.raises(AuthError):
            await worker.connect_to_cloud("broken")
        assert worker.cloud_name == "devstack"
        assert worker.connected
        await worker.close()

    @pytest.mark.asyncio
    async def test_unknown_cloud(self, worker):
        with pytest.raises(CloudNotFoundError):
            await worker.connect_to_cloud("nope")

    def test_not_connected_info(self, worker):
        assert worker.connection_info() == ConnectionInfo()

    @pytest.mark.asyncio
    async def test_requests_need_connection(self, worker):
        with pytest.raises(ConfigError, match="Not connected"):
            await worker.perform(build_request("compute.servers"))


class TestRequests:
    """Tests for listings and project switching."""

    @pytest.mark.asyncio
    async def test_perform(self, worker, fake_cloud):
        fake_cloud.add("GET", SERVERS_URL, json={"servers": [{"id": "s1", "name": "web"}]})
        await worker.connect_to_cloud("devstack")
        assert await worker.perform(build_request("compute.servers")) == [{"id": "s1", "name": "web"}]
        await worker.close()

    @pytest.mark.asyncio
    async def test_perform_max_items(self, worker, fake_cloud):
        fake_cloud.add("GET", SERVERS_URL, json={"servers": [{"id": "s1"}, {"id": "s2"}]})
        await worker.connect_to_cloud("devstack")
        assert await worker.perform(build_request("compute.servers"), max_items=1) == [{"id": "s1"}]
        assert fake_cloud.requests_to("GET", SERVERS_URL)[0].url.params["limit"] == "1"
        await worker.close()

    @pytest.mark.asyncio
    async def test_list_projects_sorted(self, worker, fake_cloud):
        fake_cloud.add("GET", AUTH_PROJECTS_URL, json={"projects": [
            {"id": fake_cloud.other_project_id, "name": "ops"},
            {"id": fake_cloud.project_id, "name": "Demo"},
        ]})
        await worker.connect_to_cloud("devstack")
        projects = await worker.list_projects()
        assert [p["name"] for p in projects] == ["Demo", "ops"]
        await worker.close()

    @pytest.mark.asyncio
    async def test_change_scope(self, worker, fake_cloud):
        await worker.connect_to_cloud("devstack")
        info = await worker.change_scope(fake_cloud.other_project_id)
        assert info.project == "ops"
        assert worker.session.project_id == fake_cloud.other_project_id
        await worker.close()

    @pytest.mark.asyncio
    async def test_token_renewed_before_request(self, worker, fake_cloud):
        fake_cloud.token_lifetime = timedelta(seconds=30)
        fake_cloud.add("GET", SERVERS_URL, json={"servers": []})
        await worker.connect_to_cloud("devstack")
        assert worker.connection_info().token_state is AuthState.ABOUT_TO_EXPIRE

        await worker.perform(build_request("compute.servers"))

        assert worker.session.get_auth_token() == "token-2"
        assert fake_cloud.requests_to("GET", SERVERS_URL)[0].headers["X-Auth-Token"] == "token-2"
        await worker.close()
