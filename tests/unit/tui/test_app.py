"""
Unit Tests for the Dashboard App.

The app runs headless through textual's pilot against FakeCloud.
"""

from datetime import timedelta

import pytest

from ostack.core.config_schema import TuiModeSchema, TuiSchema
from ostack.sdk.config import ConfigFile
from ostack.tui.app import OpenStackTUI
from ostack.tui.screens import ErrorScreen, SelectScreen
from ostack.tui.widgets import ResourceTable, StatusBar
from ostack.tui.worker import CloudWorker

SERVERS = [
    {"id": "s1", "name": "web-1", "status": "ACTIVE"},
    {"id": "s2", "name": "db-1", "status": "SHUTOFF"},
]


@pytest.fixture
def worker(fake_cloud, clouds_file):
    fake_cloud.add("GET", "https://compute.example/v2.1/servers/detail", json={"servers": SERVERS})
    fake_cloud.add("GET", "https://network.example/v2.0/networks", json={"networks": [{"id": "n1", "name": "private"}]})
    return CloudWorker(
        config_file=ConfigFile.from_sources([clouds_file]),
        expiration_offset=timedelta(seconds=10),
        transport=fake_cloud.transport,
    )


async def settle(app, pilot):
    for _ in range(3):
        await app.workers.wait_for_complete()
        await pilot.pause()


class TestDashboard:
    """Tests for the dashboard flow."""

    @pytest.mark.asyncio
    async def test_connect_loads_default_mode(self, worker):
        app = OpenStackTUI(cloud="devstack", worker=worker)
        async with app.run_test() as pilot:
            await settle(app, pilot)
            table = app.query_one(ResourceTable)
            assert table.row_count == 2
            assert app.query_one(StatusBar).state == "ready"

    @pytest.mark.asyncio
    async def test_mode_key_switches_listing(self, worker):
        app = OpenStackTUI(cloud="devstack", worker=worker)
        async with app.run_test() as pilot:
            await settle(app, pilot)
            await pilot.press("3")
            await settle(app, pilot)
            assert app.mode.id == "network.networks"
            assert app.query_one(ResourceTable).records == [{"id": "n1", "name": "private"}]

    @pytest.mark.asyncio
    async def test_filter(self, worker):
        app = OpenStackTUI(cloud="devstack", worker=worker)
        async with app.run_test() as pilot:
            await settle(app, pilot)
            await pilot.press("slash", "w", "e", "b")
            await pilot.pause()
            status = app.query_one(StatusBar)
            assert status.shown == 1
            assert status.total == 2

    @pytest.mark.asyncio
    async def test_connect_failure_shows_error(self, worker):
        app = OpenStackTUI(cloud="broken", worker=worker)
        async with app.run_test() as pilot:
            await settle(app, pilot)
            assert isinstance(app.screen, ErrorScreen)
            assert "broken" in app.screen.message

    @pytest.mark.asyncio
    async def test_cloud_popup_without_initial_cloud(self, worker):
        app = OpenStackTUI(worker=worker)
        async with app.run_test() as pilot:
            await pilot.pause()
            assert isinstance(app.screen, SelectScreen)
            assert [item_id for item_id, _ in app.screen.items] == ["broken", "devstack"]

    @pytest.mark.asyncio
    async def test_record_not_matching_model_shows_error(self, worker, fake_cloud):
        servers_url = "https://compute.example/v2.1/servers/detail"
        fake_cloud.routes.pop(("GET", servers_url))
        fake_cloud.add("GET", servers_url, json={"servers": [{"name": "no-id"}]})
        app = OpenStackTUI(cloud="devstack", worker=worker)
        async with app.run_test() as pilot:
            await settle(app, pilot)
            assert isinstance(app.screen, ErrorScreen)
            assert "Server" in app.screen.message
            assert app.query_one(StatusBar).state == "error"
            assert app.is_running

    @pytest.mark.asyncio
    async def test_mode_view_selects_columns(self, worker):
        settings = TuiSchema(
            default_mode="network.networks",
            auto_refresh_seconds=0,
            expiration_offset_seconds=10,
            modes=[TuiModeSchema(id="network.networks", title="Networks", key="3", view="identity.project")],
        )
        app = OpenStackTUI(cloud="devstack", worker=worker, settings=settings)
        async with app.run_test() as pilot:
            await settle(app, pilot)
            table = app.query_one(ResourceTable)
            assert [str(column.label) for column in table.columns.values()] == ["id", "name", "domain_id", "enabled"]
