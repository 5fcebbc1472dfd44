"""
Unit Tests for Cloud Configuration.

Covers clouds.yaml loading and merging, vendor profiles, secure.yaml
secrets, OS_* environment configuration and the identity hash.
"""

import json
from unittest.mock import patch

import pytest
import yaml

from ostack.core.config import Settings, get_settings
from ostack.core.exceptions import CloudNotFoundError, ConfigError
from ostack.sdk.config import AuthConfig, CloudConfig, ConfigFile, get_config_file_search_paths


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data))
    return path


@pytest.fixture
def no_default_files():
    with patch("ostack.sdk.config.find_config_file", return_value=None):
        yield


class TestConfigFile:
    """Tests for loading and merging configuration files."""

    def test_secure_file_merged_over_clouds(self, tmp_path, no_default_files):
        clouds = write_yaml(tmp_path / "clouds.yaml", {
            "clouds": {"prod": {"auth": {"auth_url": "https://k.example/v3", "username": "u"}}},
        })
        secure = write_yaml(tmp_path / "secure.yaml", {
            "clouds": {"prod": {"auth": {"password": "p"}}},
        })
        config = ConfigFile.load(str(clouds), str(secure)).get_cloud_config("prod")
        assert config.auth.username == "u"
        assert config.auth.password == "p"

    def test_json_source(self, tmp_path):
        path = tmp_path / "clouds.json"
        path.write_text(json.dumps({"clouds": {"a": {"region_name": "R"}}}))
        assert ConfigFile.from_sources([path]).get_cloud_config("a").region_name == "R"

    def test_missing_explicit_file(self, tmp_path, no_default_files):
        with pytest.raises(ConfigError, match="does not exist"):
            ConfigFile.load(str(tmp_path / "nope.yaml"))

    def test_explicit_file_from_environment(self, clouds_file, monkeypatch, no_default_files):
        monkeypatch.setenv("OS_CLIENT_CONFIG_FILE", str(clouds_file))
        get_settings.cache_clear()
        assert ConfigFile.load().get_available_clouds() == ["broken", "devstack"]

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "clouds.yaml"
        path.write_text("clouds: [unclosed")
        with pytest.raises(ConfigError, match="Cannot read"):
            ConfigFile.from_sources([path])

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "clouds.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            ConfigFile.from_sources([path])

    def test_unknown_cloud(self, clouds_file):
        with pytest.raises(CloudNotFoundError):
            ConfigFile.from_sources([clouds_file]).get_cloud_config("nope")

    def test_auth_cache_flag(self, clouds_file):
        assert ConfigFile.from_sources([clouds_file]).is_auth_cache_enabled() is False
        assert ConfigFile({}).is_auth_cache_enabled() is True

    @pytest.mark.parametrize("cache", [{"auth": "maybe"}, "yes", ["auth"]])
    def test_invalid_cache_section(self, cache):
        with pytest.raises(ConfigError, match="cache"):
            ConfigFile({"cache": cache}).is_auth_cache_enabled()

    def test_profile_applied(self):
        config_file = ConfigFile({
            "public-clouds": {
                "vendor": {
                    "auth": {"auth_url": "https://vendor.example/v3"},
                    "region_name": "VendorRegion",
                    "interface": "internal",
                },
            },
            "clouds": {"mine": {"profile": "vendor", "auth": {"username": "me"}, "region_name": "Mine"}},
        })
        config = config_file.get_cloud_config("mine")
        assert config.auth.auth_url == "https://vendor.example/v3"
        assert config.auth.username == "me"
        assert config.region_name == "Mine"
        assert config.interface == "internal"

    def test_missing_profile_keeps_cloud(self):
        config = ConfigFile({"clouds": {"c": {"profile": "gone", "region_name": "R"}}}).get_cloud_config("c")
        assert config.region_name == "R"

    def test_search_paths(self):
        paths = get_config_file_search_paths("clouds")
        assert paths[0].name == "clouds.yaml"
        assert str(paths[-1]) == "/etc/openstack/clouds.json"


class TestCloudConfig:
    """Tests for the CloudConfig model."""

    def test_extra_keys_are_options(self):
        config = CloudConfig.model_validate({"region_name": "R", "network_endpoint_override": "https://n/"})
        assert config.options == {"network_endpoint_override": "https://n/"}

    def test_update_fills_unset_only(self):
        config = CloudConfig(auth=AuthConfig(username="a"), region_name="R1")
        config.update(CloudConfig(auth=AuthConfig(username="b", password="p"), region_name="R2", interface="admin"))
        assert config.auth.username == "a"
        assert config.auth.password == "p"
        assert config.region_name == "R1"
        assert config.interface == "admin"

    def test_repr_hides_secrets(self):
        text = repr(AuthConfig(username="u", password="hunter2", token="t0k"))
        assert "hunter2" not in text
        assert "t0k" not in text
        assert "'u'" in text

    def test_identity_hash_ignores_project_and_password(self):
        a = CloudConfig(auth=AuthConfig(auth_url="https://k/v3", username="u", password="x", project_name="p1"))
        b = CloudConfig(auth=AuthConfig(auth_url="https://k/v3", username="u", password="y", project_name="p2"))
        c = CloudConfig(auth=AuthConfig(auth_url="https://k/v3", username="other"))
        assert a.get_identity_hash() == b.get_identity_hash()
        assert a.get_identity_hash() != c.get_identity_hash()
        assert len(a.get_identity_hash()) == 16

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("OS_AUTH_URL", "https://k.example/v3")
        monkeypatch.setenv("OS_USERNAME", "admin")
        monkeypatch.setenv("OS_PASSWORD", "secret")
        monkeypatch.setenv("OS_REGION_NAME", "RegionOne")
        monkeypatch.setenv("OS_INSECURE", "1")
        config = CloudConfig.from_env(Settings())
        assert config.auth.auth_url == "https://k.example/v3"
        assert config.auth.password == "secret"
        assert config.region_name == "RegionOne"
        assert config.verify is False
