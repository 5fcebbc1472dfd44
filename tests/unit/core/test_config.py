"""
Unit Tests for Configuration Management.

Black box tests against the public interface of config.py.
Tests run against the packaged YAML settings; user overrides are written
to the OSC_CONFIG_DIR prepared by the root isolated_config fixture.
"""

from pathlib import Path

import pytest
import yaml

from ostack.core.config import (
    AppConfig,
    Settings,
    deep_merge,
    get_app_config,
    get_config_dir,
    get_http_timeouts,
    get_settings,
    get_state_dir,
    load_yaml_config,
)
from ostack.core.config_schema import ApplicationSchema, TuiSchema, ViewSchema, ViewsSchema


def write_override(config_dir: Path, filename: str, data: dict) -> None:
    (config_dir / filename).write_text(yaml.safe_dump(data))
    get_app_config.cache_clear()


# =============================================================================
# deep_merge
# =============================================================================


class TestDeepMerge:
    """Tests for recursive dictionary merging."""

    def test_override_wins_for_scalars(self):
        assert deep_merge({"a": 1, "b": 2}, {"b": 3}) == {"a": 1, "b": 3}

    def test_nested_dicts_merged_key_by_key(self):
        base = {"http": {"timeouts": {"connect": 10, "read": 120}, "user_agent": "x"}}
        result = deep_merge(base, {"http": {"timeouts": {"read": 5}}})
        assert result == {"http": {"timeouts": {"connect": 10, "read": 5}, "user_agent": "x"}}

    def test_lists_are_replaced(self):
        assert deep_merge({"a": [1, 2]}, {"a": [3]}) == {"a": [3]}

    def test_inputs_not_modified(self):
        base = {"a": {"b": 1}}
        override = {"a": {"c": 2}}
        deep_merge(base, override)
        assert base == {"a": {"b": 1}}
        assert override == {"a": {"c": 2}}


# =============================================================================
# load_yaml_config
# =============================================================================


class TestLoadYamlConfig:
    """Tests for packaged defaults and user overrides."""

    def test_loads_packaged_defaults(self):
        data = load_yaml_config("application.yaml")
        assert data["name"] == "ostack"
        assert "timeouts" in data["http"]

    def test_user_override_is_merged(self, isolated_config):
        write_override(isolated_config, "application.yaml", {"http": {"timeouts": {"read": 7}}})
        data = load_yaml_config("application.yaml")
        assert data["http"]["timeouts"]["read"] == 7
        assert data["http"]["timeouts"]["connect"] == 10

    def test_missing_default_raises(self):
        with pytest.raises(FileNotFoundError, match="nope.yaml"):
            load_yaml_config("nope.yaml")

    def test_config_dir_from_environment(self, isolated_config):
        assert get_config_dir() == isolated_config

    def test_config_dir_default(self, monkeypatch):
        monkeypatch.delenv("OSC_CONFIG_DIR")
        assert get_config_dir() == Path.home() / ".config" / "osc"


# =============================================================================
# AppConfig
# =============================================================================


class TestAppConfig:
    """Tests for the validated application configuration."""

    def test_all_sections_load(self):
        config = AppConfig()
        assert isinstance(config.application, ApplicationSchema)
        assert isinstance(config.views, ViewsSchema)
        assert isinstance(config.tui, TuiSchema)
        assert config.logging.handlers.file.enabled is True

    def test_get_app_config_is_cached(self):
        assert get_app_config() is get_app_config()

    def test_unknown_key_in_override_fails(self, isolated_config):
        write_override(isolated_config, "tui.yaml", {"auto_refresh": 5})
        with pytest.raises(ValueError, match="tui.yaml"):
            AppConfig()

    def test_wrong_type_in_override_fails(self, isolated_config):
        write_override(isolated_config, "application.yaml", {"listing": {"max_items": "many"}})
        with pytest.raises(ValueError, match="application.yaml"):
            AppConfig()

    def test_tui_modes_have_unique_keys(self):
        modes = get_app_config().tui.modes
        keys = [mode.key for mode in modes]
        assert len(keys) == len(set(keys))
        assert get_app_config().tui.default_mode in {mode.id for mode in modes}

    def test_state_dir_follows_override(self, isolated_config, tmp_path):
        assert get_state_dir() == tmp_path / "state"

    def test_http_timeouts(self):
        assert get_http_timeouts() == (10.0, 120.0)


class TestViewSchema:
    """Tests for view field lookup."""

    def test_get_field_case_insensitive(self):
        view = get_app_config().views.views["compute.server"]
        field = view.get_field("FLAVOR")
        assert field is not None
        assert field.json_pointer == "/original_name"

    def test_get_field_missing(self):
        assert ViewSchema().get_field("id") is None


# =============================================================================
# Settings
# =============================================================================


class TestSettings:
    """Tests for OS_* environment settings."""

    def test_reads_os_prefixed_variables(self, monkeypatch):
        monkeypatch.setenv("OS_AUTH_URL", "https://keystone.example/v3")
        monkeypatch.setenv("OS_PROJECT_NAME", "demo")
        monkeypatch.setenv("OS_INSECURE", "true")
        settings = Settings()
        assert settings.auth_url == "https://keystone.example/v3"
        assert settings.project_name == "demo"
        assert settings.insecure is True

    def test_unset_variables_are_none(self):
        settings = get_settings()
        assert settings.cloud is None
        assert settings.password is None
