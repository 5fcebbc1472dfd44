"""
Cloud Configuration (clouds.yaml).

Reads the standard OpenStack client configuration files:

    clouds-public.{yaml,yml,json}   vendor profiles ("public-clouds" key)
    clouds.{yaml,yml,json}          cloud connections ("clouds" key)
    secure.{yaml,yml,json}          secrets, deep-merged over clouds

Each file is searched in the current directory, ~/.config/openstack and
/etc/openstack. Explicitly given files are loaded after the found ones.

Usage:
    config_file = ConfigFile.load()
    cloud = config_file.get_cloud_config("devstack")

    # From OS_* environment variables
    cloud = CloudConfig.from_env()
"""

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

from ostack.core.config import Settings, deep_merge, get_settings
from ostack.core.exceptions import CloudNotFoundError, ConfigError
from ostack.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

CONFIG_SUFFIXES = (".yaml", ".yml", ".json")


# =============================================================================
# Models
# =============================================================================


class AuthConfig(BaseModel):
    """The "auth" section of a cloud."""

    model_config = ConfigDict(extra="allow")

    auth_url: str | None = None
    endpoint: str | None = None
    token: str | None = None

    username: str | None = None
    user_id: str | None = None
    user_domain_id: str | None = None
    user_domain_name: str | None = None
    password: str | None = None
    passcode: str | None = None

    domain_id: str | None = None
    domain_name: str | None = None
    project_id: str | None = None
    project_name: str | None = None
    project_domain_id: str | None = None
    project_domain_name: str | None = None

    protocol: str | None = None
    identity_provider: str | None = None

    application_credential_id: str | None = None
    application_credential_name: str | None = None
    application_credential_secret: str | None = None

    def __repr__(self) -> str:
        visible = {
            k: v for k, v in self.model_dump(exclude_none=True).items()
            if k not in ("password", "token", "passcode", "application_credential_secret")
        }
        return f"AuthConfig({visible!r})"


class CacheConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    auth: bool | None = None


class CloudConfig(BaseModel):
    """
    Connection settings of one cloud.

    Unknown keys (e.g. "network_endpoint_override") are kept and available
    through `options`.
    """

    model_config = ConfigDict(extra="allow")

    auth: AuthConfig | None = None
    auth_type: str | None = None
    auth_methods: list[str] | None = None
    profile: str | None = None
    interface: str | None = None
    region_name: str | None = None
    cacert: str | None = None
    verify: bool | None = None

    @property
    def options(self) -> dict[str, Any]:
        return dict(self.model_extra or {})

    def update(self, other: "CloudConfig") -> None:
        """Fill keys that are not set here with the values of other."""
        if other.auth is not None:
            if self.auth is None:
                self.auth = AuthConfig()
            for name in AuthConfig.model_fields:
                if getattr(self.auth, name) is None and getattr(other.auth, name) is not None:
                    setattr(self.auth, name, getattr(other.auth, name))

        for name in ("auth_type", "auth_methods", "profile", "interface", "region_name", "cacert", "verify"):
            if getattr(self, name) is None and getattr(other, name) is not None:
                setattr(self, name, getattr(other, name))

        extra = self.model_extra if self.model_extra is not None else {}
        for key, value in (other.model_extra or {}).items():
            extra.setdefault(key, value)

    def get_identity_hash(self) -> str:
        """Stable hash of the user identity. Keys the token cache."""
        parts: list[str] = []
        if self.auth is not None:
            for name in (
                "auth_url",
                "username",
                "user_id",
                "user_domain_id",
                "user_domain_name",
                "identity_provider",
                "protocol",
                "application_credential_name",
                "application_credential_id",
            ):
                parts.append(f"{name}={getattr(self.auth, name) or ''}")
        parts.append(f"profile={self.profile or ''}")
        return hashlib.sha256("\n".join(parts).encode()).hexdigest()[:16]

    @classmethod
    def from_env(cls, settings: Settings | None = None) -> "CloudConfig":
        """Build a cloud from OS_* environment variables."""
        settings = settings or get_settings()
        auth = AuthConfig(
            **{
                name: getattr(settings, name)
                for name in AuthConfig.model_fields
                if getattr(settings, name, None) is not None
            }
        )
        verify = None if settings.insecure is None else not settings.insecure
        return cls(
            auth=auth,
            auth_type=settings.auth_type,
            interface=settings.interface,
            region_name=settings.region_name,
            cacert=settings.cacert,
            verify=verify,
        )


# =============================================================================
# File discovery and loading
# =============================================================================


def get_config_file_search_paths(filename: str) -> list[Path]:
    """Candidate paths for a config file, in lookup order."""
    directories = [
        Path.cwd(),
        Path.home() / ".config" / "openstack",
        Path("/etc/openstack"),
    ]
    return [d / f"{filename}{suffix}" for d in directories for suffix in CONFIG_SUFFIXES]


def find_config_file(filename: str) -> Path | None:
    for path in get_config_file_search_paths(filename):
        if path.is_file():
            return path
    return None


def _read_config_source(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            if path.suffix == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} does not contain a mapping")
    return data


class ConfigFile:
    """Merged content of the clouds, secure and vendor configuration files."""

    def __init__(self, data: dict[str, Any] | None = None, sources: list[Path] | None = None) -> None:
        self.data = data or {}
        self.sources = sources or []

    @classmethod
    def from_sources(cls, sources: list[Path | str]) -> "ConfigFile":
        data: dict[str, Any] = {}
        paths = []
        for source in sources:
            path = Path(source).expanduser()
            data = deep_merge(data, _read_config_source(path))
            paths.append(path)
        return cls(data, paths)

    @classmethod
    def load(
        cls,
        clouds_file: str | None = None,
        secure_file: str | None = None,
    ) -> "ConfigFile":
        """
        Load the default configuration files plus user specified ones.

        Raises:
            ConfigError: If a user specified file does not exist or a file
                cannot be parsed
        """
        settings = get_settings()
        clouds_file = clouds_file or settings.client_config_file
        secure_file = secure_file or settings.client_secure_file

        for explicit in (clouds_file, secure_file):
            if explicit and not Path(explicit).expanduser().is_file():
                raise ConfigError(f"Configuration file {explicit} does not exist")

        sources: list[Path | str] = []
        for candidate in (
            find_config_file("clouds-public"),
            find_config_file("clouds"),
            clouds_file,
            find_config_file("secure"),
            secure_file,
        ):
            if candidate:
                sources.append(candidate)

        config_file = cls.from_sources(sources)
        log_with_source(
            logger, "sdk", "debug", "Loaded cloud configuration",
            sources=[str(s) for s in config_file.sources],
        )
        return config_file

    @property
    def clouds(self) -> dict[str, Any]:
        return self.data.get("clouds") or {}

    @property
    def public_clouds(self) -> dict[str, Any]:
        return self.data.get("public-clouds") or {}

    def get_cloud_config(self, name: str) -> CloudConfig:
        """
        Return the named cloud with its vendor profile applied.

        Raises:
            CloudNotFoundError: If there is no such cloud
            ConfigError: If the cloud definition is invalid
        """
        raw = self.clouds.get(name)
        if raw is None:
            raise CloudNotFoundError(name)
        try:
            config = CloudConfig.model_validate(raw)
            if config.profile:
                profile = self.public_clouds.get(config.profile)
                if profile is None:
                    log_with_source(
                        logger, "sdk", "warning", "Cannot find profile definition",
                        cloud=name, profile=config.profile,
                    )
                else:
                    config.update(CloudConfig.model_validate(profile))
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration of cloud `{name}`: {e}") from e
        return config

    def is_auth_cache_enabled(self) -> bool:
        try:
            cache = CacheConfig.model_validate(self.data.get("cache") or {})
        except ValidationError as e:
            raise ConfigError(f"Invalid `cache` configuration: {e}") from e
        return True if cache.auth is None else cache.auth

    def get_available_clouds(self) -> list[str]:
        return sorted(self.clouds)
