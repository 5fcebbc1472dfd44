"""
Configuration Management.

Loads application settings from YAML and the OS_* environment.
Packaged defaults live in ostack/settings/*.yaml. A user directory
($OSC_CONFIG_DIR, default ~/.config/osc) may hold files with the same
names; their values are deep-merged over the defaults.

Environment (OS_*):
    OS_CLOUD, OS_CLIENT_CONFIG_FILE, OS_CLIENT_SECURE_FILE, OS_AUTH_URL,
    OS_USERNAME, OS_PASSWORD, OS_PROJECT_NAME, OS_TOKEN, ...

Settings (YAML):
    application.yaml   - App identity, HTTP timeouts, auth cache, list defaults
    logging.yaml       - Logging configuration
    views.yaml         - Output views (columns per resource) and hints
    tui.yaml           - Dashboard modes and refresh settings

Cloud connection settings (clouds.yaml) are handled by ostack.sdk.config.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from ostack.core.config_schema import (
    ApplicationSchema,
    LoggingSchema,
    TuiSchema,
    ViewsSchema,
)

DEFAULTS_DIR = Path(__file__).resolve().parent.parent / "settings"


def get_config_dir() -> Path:
    """Return the user configuration directory ($OSC_CONFIG_DIR or ~/.config/osc)."""
    configured = os.environ.get("OSC_CONFIG_DIR")
    if configured:
        return Path(configured).expanduser()
    return Path.home() / ".config" / "osc"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Recursively merge two dictionaries.

    Values from override win; nested dictionaries are merged key by key.
    Neither input is modified.
    """
    result = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_config(filename: str) -> dict[str, Any]:
    """Load a YAML settings file: packaged default merged with the user override."""
    default_path = DEFAULTS_DIR / filename

    if not default_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {default_path}")

    with open(default_path) as f:
        data = yaml.safe_load(f) or {}

    user_path = get_config_dir() / filename
    if user_path.is_file():
        with open(user_path) as f:
            data = deep_merge(data, yaml.safe_load(f) or {})

    return data


class Settings(BaseSettings):
    """OS_* environment variables. Used for env based cloud configuration."""

    cloud: str | None = None
    client_config_file: str | None = None
    client_secure_file: str | None = None

    auth_url: str | None = None
    auth_type: str | None = None
    endpoint: str | None = None
    token: str | None = None
    username: str | None = None
    user_id: str | None = None
    user_domain_id: str | None = None
    user_domain_name: str | None = None
    password: str | None = None
    passcode: str | None = None
    project_id: str | None = None
    project_name: str | None = None
    project_domain_id: str | None = None
    project_domain_name: str | None = None
    domain_id: str | None = None
    domain_name: str | None = None
    application_credential_id: str | None = None
    application_credential_name: str | None = None
    application_credential_secret: str | None = None

    region_name: str | None = None
    interface: str | None = None
    cacert: str | None = None
    insecure: bool | None = None

    model_config = SettingsConfigDict(
        env_prefix="OS_",
        case_sensitive=False,
        extra="ignore",
    )


def _load_validated(schema_cls: type, filename: str) -> Any:
    """Load YAML and validate against schema. Returns typed model instance."""
    raw = load_yaml_config(filename)
    try:
        return schema_cls(**raw)
    except ValidationError as e:
        raise ValueError(
            f"Invalid configuration in {filename}:\n{e}"
        ) from e


class AppConfig:
    """
    Application configuration loaded from YAML files.

    Each YAML file is validated against its Pydantic schema at load time.
    Unknown keys or wrong types in a user override raise a clear error
    immediately instead of failing deep inside a command.
    """

    def __init__(self) -> None:
        self._application = _load_validated(ApplicationSchema, "application.yaml")
        self._logging = _load_validated(LoggingSchema, "logging.yaml")
        self._views = _load_validated(ViewsSchema, "views.yaml")
        self._tui = _load_validated(TuiSchema, "tui.yaml")

    @property
    def application(self) -> ApplicationSchema:
        """Application settings."""
        return self._application

    @property
    def logging(self) -> LoggingSchema:
        """Logging settings."""
        return self._logging

    @property
    def views(self) -> ViewsSchema:
        """Output views and hints."""
        return self._views

    @property
    def tui(self) -> TuiSchema:
        """Dashboard settings."""
        return self._tui


@lru_cache
def get_settings() -> Settings:
    """Get cached OS_* environment settings."""
    return Settings()


@lru_cache
def get_app_config() -> AppConfig:
    """Get cached application configuration."""
    return AppConfig()


def get_state_dir() -> Path:
    """Directory for the token cache and log files (application.yaml auth.cache_dir)."""
    return Path(get_app_config().application.auth.cache_dir).expanduser()


def get_http_timeouts() -> tuple[float, float]:
    """
    Get the HTTP connect and read timeouts from application.yaml.

    Returns:
        Tuple of (connect_timeout, read_timeout) in seconds.
    """
    timeouts = get_app_config().application.http.timeouts
    return float(timeouts.connect), float(timeouts.read)
