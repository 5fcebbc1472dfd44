"""
Cloud Worker.

Owns the AsyncOpenStack session of the dashboard. The app calls it from
textual workers; every call either returns data or raises an
ApplicationError which the app shows in an error popup.

Before each API request the token is renewed when it is expired or about
to expire (tui.yaml expiration_offset_seconds).
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import httpx

from ostack.core.config import get_app_config
from ostack.core.exceptions import ConfigError
from ostack.core.logging import get_logger, log_with_source
from ostack.sdk.api.identity.auth import ListAuthProjects
from ostack.sdk.api.paged import Pagination, paged
from ostack.sdk.auth.scope import AuthScope
from ostack.sdk.auth.token import AuthState
from ostack.sdk.config import ConfigFile
from ostack.sdk.session import AsyncOpenStack
from ostack.tui.requests import ApiRequest

logger = get_logger(__name__)


@dataclass
class ConnectionInfo:
    """What the header shows about the current connection."""

    cloud: str | None = None
    project: str | None = None
    domain: str | None = None
    region: str | None = None
    token_state: AuthState = AuthState.UNSET


class CloudWorker:
    """Session holder executing the dashboard requests."""

    def __init__(
        self,
        config_file: ConfigFile | None = None,
        expiration_offset: timedelta | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config_file = config_file
        if expiration_offset is None:
            expiration_offset = timedelta(seconds=get_app_config().tui.expiration_offset_seconds)
        self.expiration_offset = expiration_offset
        self._transport = transport
        self.cloud_name: str | None = None
        self.session: AsyncOpenStack | None = None

    @property
    def config_file(self) -> ConfigFile:
        if self._config_file is None:
            self._config_file = ConfigFile.load()
        return self._config_file

    @property
    def connected(self) -> bool:
        return self.session is not None

    def _require_session(self) -> AsyncOpenStack:
        if self.session is None:
            raise ConfigError("Not connected to a cloud (ctrl+o selects one)")
        return self.session

    def list_clouds(self) -> list[str]:
        return self.config_file.get_available_clouds()

    async def connect_to_cloud(self, cloud: str) -> ConnectionInfo:
        """
        Connect to a cloud of clouds.yaml, replacing the current session.

        Raises:
            CloudNotFoundError: If the cloud is not configured
            AuthError: If authentication fails
        """
        log_with_source(logger, "tui", "info", "Connecting to cloud", cloud=cloud)
        config = self.config_file.get_cloud_config(cloud)
        session = await AsyncOpenStack.connect(
            config,
            transport=self._transport,
            cache_enabled=self.config_file.is_auth_cache_enabled(),
        )
        await self.close()
        self.session = session
        self.cloud_name = cloud
        return self.connection_info()

    async def list_projects(self) -> list[dict[str, Any]]:
        """Projects the current token may be re-scoped to."""
        session = self._require_session()
        await self.renew_if_needed()
        projects = await ListAuthProjects().query(session)
        return sorted(projects, key=lambda p: (p.get("name") or "").lower())

    async def change_scope(self, project_id: str) -> ConnectionInfo:
        """Re-scope the session to another project of the user."""
        session = self._require_session()
        log_with_source(logger, "tui", "info", "Switching project", project_id=project_id)
        await self.renew_if_needed()
        await session.reauthorize(AuthScope.for_project(id=project_id))
        return self.connection_info()

    async def renew_if_needed(self) -> None:
        session = self._require_session()
        state = session.get_auth_state(self.expiration_offset)
        if state in (AuthState.EXPIRED, AuthState.ABOUT_TO_EXPIRE):
            log_with_source(logger, "tui", "info", "Renewing token", state=state.value)
            await session.renew_if_needed(self.expiration_offset)

    async def perform(self, request: ApiRequest, max_items: int | None = None) -> list[Any]:
        """Run the listing of a mode and return its items."""
        session = self._require_session()
        await self.renew_if_needed()
        listing = get_app_config().application.listing
        pagination = Pagination.limit(max_items or listing.max_items)
        log_with_source(logger, "tui", "debug", "Performing request", mode=request.mode)
        return await paged(request.endpoint, pagination, page_size=listing.page_size).query(session)

    def connection_info(self) -> ConnectionInfo:
        if self.session is None:
            return ConnectionInfo()
        info = self.session.get_auth_info()
        project = domain = None
        if info is not None and info.token.project is not None:
            project = info.token.project.name or info.token.project.id
            if info.token.project.domain is not None:
                domain = info.token.project.domain.name or info.token.project.domain.id
        elif info is not None and info.token.domain is not None:
            domain = info.token.domain.name or info.token.domain.id
        return ConnectionInfo(
            cloud=self.cloud_name,
            project=project,
            domain=domain,
            region=self.session.region,
            token_state=self.session.get_auth_state(self.expiration_offset),
        )

    async def close(self) -> None:
        if self.session is not None:
            await self.session.close()
            self.session = None
