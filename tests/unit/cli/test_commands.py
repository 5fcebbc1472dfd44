"""
Unit Tests for osc Commands.

Commands run through typer's CliRunner against FakeCloud: the session
factory is patched to use the fake transport, clouds come from the
clouds_file fixture.
"""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from ostack.cli.app import app
from ostack.sdk.session import AsyncOpenStack

runner = CliRunner()

NETWORKS_URL = "https://network.example/v2.0/networks"

PRIVATE = {"id": "n1", "name": "private", "status": "ACTIVE", "subnets": ["s1"]}


@pytest.fixture
def cloud(fake_cloud, clouds_file, monkeypatch):
    """FakeCloud reachable from the commands, with the base options to select it."""
    original = AsyncOpenStack.connect

    async def connect(config, **kwargs):
        return await original(config, transport=fake_cloud.transport, **kwargs)

    monkeypatch.setattr(AsyncOpenStack, "connect", connect)
    fake_cloud.base_args = ["--os-client-config-file", str(clouds_file), "--os-cloud", "devstack"]
    return fake_cloud


def invoke(cloud, *args):
    return runner.invoke(app, [*cloud.base_args, *args])


class TestMainApp:
    """Tests for the main command."""

    def test_help(self) -> None:
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "OpenStack command line client" in result.stdout

    def test_service_groups_registered(self) -> None:
        result = runner.invoke(app, ["--help"])
        for group in ("compute", "network", "object-store", "load-balancer", "container-infrastructure"):
            assert group in result.stdout

    def test_unknown_output_format(self) -> None:
        result = runner.invoke(app, ["-o", "xml", "system", "version"])
        assert result.exit_code == 2


class TestSystemCommands:
    """Tests for commands that need no cloud."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["system", "version"])
        assert result.exit_code == 0
        assert "0.4.0" in result.stdout

    def test_info(self) -> None:
        result = runner.invoke(app, ["system", "info"])
        assert result.exit_code == 0
        assert "Application Info" in result.stdout

    def test_config_section(self) -> None:
        result = runner.invoke(app, ["system", "config", "application"])
        assert result.exit_code == 0
        assert "listing" in result.stdout

    def test_config_unknown_section(self) -> None:
        result = runner.invoke(app, ["system", "config", "nope"])
        assert result.exit_code == 1
        assert "Unknown section" in result.output

    def test_clouds(self, clouds_file) -> None:
        with patch("ostack.sdk.config.find_config_file", return_value=None):
            result = runner.invoke(app, ["--os-client-config-file", str(clouds_file), "system", "clouds"])
        assert result.exit_code == 0
        assert "devstack" in result.stdout
        assert "secret" not in result.stdout

    def test_no_clouds_file(self) -> None:
        with patch("ostack.sdk.config.find_config_file", return_value=None):
            result = runner.invoke(app, ["system", "clouds"])
        assert result.exit_code == 0
        assert "No clouds.yaml found" in result.stdout


class TestAuthCommands:
    """Tests for token commands."""

    def test_login_prints_token(self, cloud) -> None:
        result = invoke(cloud, "auth", "login")
        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == "token-1"

    def test_show(self, cloud) -> None:
        result = invoke(cloud, "-o", "json", "auth", "show")
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["project"]["id"] == cloud.project_id
        assert "catalog" not in data

    def test_project_override(self, cloud) -> None:
        result = invoke(cloud, "--os-project-id", cloud.other_project_id, "auth", "login")
        assert result.exit_code == 0, result.output
        assert cloud.token_requests[0]["scope"] == {"project": {"id": cloud.other_project_id}}


class TestCatalogCommands:
    """Tests for catalog listing."""

    def test_list_by_alias(self, cloud) -> None:
        result = invoke(cloud, "-o", "json", "catalog", "list", "--service-type", "block-storage", "--interface", "public")
        assert result.exit_code == 0, result.output
        rows = json.loads(result.stdout)
        assert len(rows) == 1
        assert rows[0]["type"] == "volumev3"
        assert rows[0]["url"] == f"https://volume.example/v3/{cloud.project_id}"


class TestNetworkCommands:
    """Tests for a typical resource command group."""

    def test_list(self, cloud) -> None:
        cloud.add("GET", NETWORKS_URL, json={"networks": [PRIVATE]})
        result = invoke(cloud, "-o", "json", "network", "network", "list")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == [PRIVATE]

    def test_list_filters(self, cloud) -> None:
        cloud.add("GET", NETWORKS_URL, json={"networks": []})
        result = invoke(cloud, "-o", "json", "network", "network", "list", "--name", "private", "--external", "--limit", "5")
        assert result.exit_code == 0, result.output
        query = dict(cloud.requests_to("GET", NETWORKS_URL)[0].url.params)
        assert query["name"] == "private"
        assert query["router:external"] == "true"
        assert query["limit"] == "5"

    def test_list_table(self, cloud) -> None:
        cloud.add("GET", NETWORKS_URL, json={"networks": [PRIVATE]})
        result = invoke(cloud, "-f", "ID", "-f", "Name", "network", "network", "list")
        assert result.exit_code == 0, result.output
        assert "private" in result.stdout
        assert "ACTIVE" not in result.stdout

    def test_show_by_name(self, cloud) -> None:
        cloud.add("GET", NETWORKS_URL, json={"networks": [PRIVATE]})
        result = invoke(cloud, "-o", "json", "network", "network", "show", "private")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["id"] == "n1"
        assert cloud.requests_to("GET", NETWORKS_URL + "/private")

    def test_show_not_found(self, cloud) -> None:
        cloud.add("GET", NETWORKS_URL, json={"networks": []})
        result = invoke(cloud, "network", "network", "show", "missing")
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_create(self, cloud) -> None:
        cloud.add("POST", NETWORKS_URL, status=201, json={"network": {"id": "n3", "name": "n3"}})
        result = invoke(cloud, "-o", "json", "network", "network", "create", "n3", "--external")
        assert result.exit_code == 0, result.output
        body = json.loads(cloud.requests_to("POST", NETWORKS_URL)[0].content)
        assert body == {"network": {"name": "n3", "router:external": True}}

    def test_delete_by_name(self, cloud) -> None:
        cloud.add("GET", NETWORKS_URL, json={"networks": [PRIVATE]})
        cloud.add("DELETE", NETWORKS_URL + "/n1", status=204)
        result = invoke(cloud, "network", "network", "delete", "private")
        assert result.exit_code == 0, result.output
        assert "Deleted network n1" in result.stderr

    def test_delete_keeps_json_output_clean(self, cloud) -> None:
        cloud.add("GET", NETWORKS_URL, json={"networks": [PRIVATE]})
        cloud.add("DELETE", NETWORKS_URL + "/n1", status=204)
        result = invoke(cloud, "-o", "json", "network", "network", "delete", "n1")
        assert result.exit_code == 0, result.output
        assert result.stdout == ""
        assert cloud.requests_to("DELETE", NETWORKS_URL + "/n1")


class TestComputeCommands:
    """Tests for server actions."""

    def test_reboot(self, cloud) -> None:
        cloud.add("GET", "https://compute.example/v2.1/servers/s1", json={"server": {"id": "s1", "name": "web"}})
        cloud.add("POST", "https://compute.example/v2.1/servers/s1/action", status=202)
        result = invoke(cloud, "compute", "server", "reboot", "s1", "--hard")
        assert result.exit_code == 0, result.output
        assert "Rebooted server s1" in result.stderr
        body = json.loads(cloud.requests_to("POST", "https://compute.example/v2.1/servers/s1/action")[0].content)
        assert body == {"reboot": {"type": "HARD"}}


class TestObjectStoreCommands:
    """Tests for object transfers."""

    def swift(self, cloud, path):
        return f"https://swift.example/v1/AUTH_{cloud.project_id}/{path}"

    def test_upload(self, cloud, tmp_path) -> None:
        source = tmp_path / "db.sql"
        source.write_bytes(b"select 1;")
        cloud.add("PUT", self.swift(cloud, "backups/2024/db.sql"), status=201)
        result = invoke(cloud, "object-store", "object", "upload", "backups", str(source), "--name", "2024/db.sql")
        assert result.exit_code == 0, result.output
        request = cloud.requests_to("PUT", self.swift(cloud, "backups"))[0]
        assert request.content == b"select 1;"

    def test_download(self, cloud, tmp_path) -> None:
        target = tmp_path / "out.sql"
        cloud.add("GET", self.swift(cloud, "backups/2024/db.sql"), content=b"select 1;")
        result = invoke(cloud, "object-store", "object", "download", "backups", "2024/db.sql", "--file", str(target))
        assert result.exit_code == 0, result.output
        assert target.read_bytes() == b"select 1;"


class TestApiCommand:
    """Tests for raw API requests."""

    def test_get(self, cloud) -> None:
        cloud.add("GET", "https://compute.example/v2.1/servers/detail", json={"servers": []})
        result = invoke(cloud, "-o", "json", "api", "compute", "servers/detail", "--microversion", "2.53")
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"servers": []}
        request = cloud.requests_to("GET", "https://compute.example/v2.1/servers")[0]
        assert request.headers["X-OpenStack-Nova-API-Version"] == "2.53"
        assert request.headers["X-Auth-Token"] == "token-1"

    def test_post_body(self, cloud) -> None:
        cloud.add("POST", NETWORKS_URL, status=201, json={"network": {"id": "n9"}})
        result = invoke(cloud, "-o", "json", "api", "network", "v2.0/networks", "-m", "post", "--body", '{"network": {}}')
        assert result.exit_code == 0, result.output
        assert json.loads(cloud.requests_to("POST", NETWORKS_URL)[0].content) == {"network": {}}

    def test_service_error(self, cloud) -> None:
        cloud.add("GET", "https://compute.example/v2.1/os-hypervisors", status=403,
                  json={"forbidden": {"code": 403, "message": "Policy does not allow"}})
        result = invoke(cloud, "api", "compute", "os-hypervisors")
        assert result.exit_code == 1
        assert "Policy does not allow" in result.output

    def test_invalid_body(self, cloud) -> None:
        result = invoke(cloud, "api", "compute", "servers", "--body", "{broken")
        assert result.exit_code == 2


class TestErrors:
    """Tests for failures reported as "Error: ..." with exit code 1."""

    def test_no_cloud_selected(self) -> None:
        result = runner.invoke(app, ["auth", "login"])
        assert result.exit_code == 1
        assert "Cloud is not selected" in result.output

    def test_authentication_failure(self, cloud, clouds_file) -> None:
        result = runner.invoke(app, ["--os-client-config-file", str(clouds_file), "--os-cloud", "broken", "auth", "login"])
        assert result.exit_code == 1
        assert "Error:" in result.output

    def test_unknown_cloud(self, cloud, clouds_file) -> None:
        result = runner.invoke(app, ["--os-client-config-file", str(clouds_file), "--os-cloud", "nope", "auth", "login"])
        assert result.exit_code == 1
        assert "nope" in result.output

    def test_invalid_cache_section(self, tmp_path) -> None:
        clouds = tmp_path / "clouds.yaml"
        clouds.write_text("cache:\n  auth: maybe\nclouds:\n  c:\n    auth:\n      auth_url: https://identity.example/v3\n")
        result = runner.invoke(app, ["--os-client-config-file", str(clouds), "--os-cloud", "c", "auth", "login"])
        assert result.exit_code == 1
        assert "Error: Invalid `cache` configuration" in result.output
