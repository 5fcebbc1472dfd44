"""
OpenStack Session.

AsyncOpenStack holds everything a request needs: the HTTP client, the
token, and the service catalog. Endpoints (ostack.sdk.api) call three
methods of it:

    await session.get_service_endpoint(service_type, version)
    await session.rest(method, url, headers=..., content=...)
    session.stream(method, url, headers=..., content=...)   (async context manager)

Usage:
    config = ConfigFile.load().get_cloud_config("devstack")
    session = await AsyncOpenStack.connect(config)
    try:
        servers = await paged(ListServers()).query(session)
    finally:
        await session.close()
"""

from collections.abc import AsyncIterable, AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any

import httpx

from ostack.core.config import get_app_config, get_state_dir
from ostack.core.exceptions import AuthError, AuthMissingDataError, DiscoveryError
from ostack.core.logging import get_logger, log_with_source
from ostack.sdk.auth import (
    AuthResponse,
    AuthScope,
    AuthState,
    AuthToken,
    authenticate,
    build_identity,
    build_token_identity,
)
from ostack.sdk.catalog import Catalog, ServiceEndpoint, discover
from ostack.sdk.client import HttpClient
from ostack.sdk.config import CloudConfig
from ostack.sdk.service_authority import get_service_authority
from ostack.sdk.state import State
from ostack.sdk.types import ApiVersion, ServiceType

logger = get_logger(__name__)

Content = bytes | AsyncIterable[bytes] | None


def _verify_option(config: CloudConfig) -> bool | str:
    if config.verify is False:
        return False
    if config.cacert:
        return config.cacert
    return True


class AsyncOpenStack:
    """Authenticated connection to one cloud."""

    def __init__(
        self,
        config: CloudConfig,
        client: HttpClient | None = None,
        state: State | None = None,
        cache_enabled: bool = True,
    ) -> None:
        self.config = config
        self.client = client or HttpClient(verify=_verify_option(config))
        self.state = state or State(
            get_state_dir(), config.get_identity_hash(), cache_enabled=cache_enabled,
        )
        self.catalog = Catalog()
        self.auth: AuthToken | None = None
        self.region = config.region_name
        self.interface = config.interface or "public"

    @classmethod
    async def connect(
        cls,
        config: CloudConfig,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
        cache_enabled: bool = True,
        renew_auth: bool = False,
    ) -> "AsyncOpenStack":
        """
        Create a session and authorize it.

        Args:
            config: Cloud connection settings
            transport: Optional httpx transport (tests)
            cache_enabled: Use the on-disk token cache
            renew_auth: Drop the cached tokens of the cloud and authenticate again

        Raises:
            AuthError: If authentication fails
            ConfigError: If the config lacks auth data
        """
        client = HttpClient(verify=_verify_option(config), transport=transport)
        session = cls(config, client=client, cache_enabled=cache_enabled)
        if renew_auth:
            session.state.clear()
        try:
            await session.authorize(renew=renew_auth)
        except Exception:
            await session.close()
            raise
        return session

    async def close(self) -> None:
        await self.client.close()

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    def _headers(self, headers: dict[str, str] | None) -> dict[str, str]:
        request_headers = dict(headers or {})
        if self.auth is not None:
            request_headers.setdefault("X-Auth-Token", self.auth.token)
        return request_headers

    async def rest(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        content: Content = None,
    ) -> httpx.Response:
        """Send a request with the session token attached."""
        return await self.client.request(
            method, url, headers=self._headers(headers), content=content,
        )

    @asynccontextmanager
    async def stream(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
        content: Content = None,
    ) -> AsyncIterator[httpx.Response]:
        async with self.client.stream(
            method, url, headers=self._headers(headers), content=content,
        ) as response:
            yield response

    # -------------------------------------------------------------------------
    # Authorization
    # -------------------------------------------------------------------------

    @property
    def auth_url(self) -> str:
        if self.config.auth is None or not self.config.auth.auth_url:
            raise AuthMissingDataError("auth_url")
        return self.config.auth.auth_url

    def _ensure_identity_endpoint(self) -> None:
        identity = ServiceType.IDENTITY.value
        if identity not in self.catalog.service_endpoints and not self.catalog.has_override(identity):
            self.catalog.register_catalog_endpoint(
                identity, self.auth_url, region=self.region, interface=self.interface,
            )

    def _set_token(self, token: AuthToken) -> None:
        self.auth = token
        project_id = self.project_id
        self.catalog.process_catalog_endpoints(token.catalog, self.interface, project_id)
        self.catalog.set_endpoint_overrides(self.config.options, project_id)
        self._ensure_identity_endpoint()

    async def authorize(self, scope: AuthScope | None = None, renew: bool = False) -> AuthToken:
        """
        Obtain a token for the scope (default: the scope of the cloud config).

        A valid cached token is reused unless renew is set.
        """
        scope = scope or AuthScope.from_cloud_config(self.config)
        token = None if renew else self.state.get_auth_state(scope)
        if token is None:
            self._ensure_identity_endpoint()
            token = await authenticate(self, build_identity(self.config), scope)
            self.state.set_auth_state(token.get_scope(), token)
        else:
            log_with_source(logger, "auth", "debug", "Reusing cached token", scope=scope.kind)
        self._set_token(token)
        return token

    async def reauthorize(self, scope: AuthScope) -> AuthToken:
        """
        Switch to another scope using the current token.

        Raises:
            AuthError: If the session has no valid token
        """
        cached = self.state.get_auth_state(scope)
        if cached is not None:
            self._set_token(cached)
            return cached
        if self.auth is None or self.auth.get_state() is not AuthState.VALID:
            raise AuthError("No valid token to re-scope with")
        token = await authenticate(self, build_token_identity(self.auth), scope)
        self.state.set_auth_state(token.get_scope(), token)
        self._set_token(token)
        return token

    async def renew_if_needed(self, offset: timedelta | None = None) -> None:
        """Re-authenticate when the token is expired or about to expire."""
        if offset is None:
            offset = timedelta(seconds=get_app_config().application.auth.expiration_offset_seconds)
        if self.get_auth_state(offset) in (AuthState.EXPIRED, AuthState.ABOUT_TO_EXPIRE, AuthState.UNSET):
            scope = self.auth.get_scope() if self.auth is not None else None
            await self.authorize(scope=scope, renew=True)

    def get_auth_info(self) -> AuthResponse | None:
        return self.auth.auth_info if self.auth is not None else None

    def get_auth_token(self) -> str | None:
        return self.auth.token if self.auth is not None else None

    def get_auth_state(self, offset: timedelta | None = None) -> AuthState:
        if self.auth is None:
            return AuthState.UNSET
        return self.auth.get_state(offset)

    @property
    def project_id(self) -> str | None:
        info = self.get_auth_info()
        if info is None or info.token.project is None:
            return None
        return info.token.project.id

    @property
    def user_id(self) -> str | None:
        info = self.get_auth_info()
        if info is None or info.token.user is None:
            return None
        return info.token.user.id

    def get_token_catalog(self) -> list[dict[str, Any]]:
        return self.catalog.get_token_catalog()

    # -------------------------------------------------------------------------
    # Endpoints
    # -------------------------------------------------------------------------

    async def discover_service_endpoint(self, service_type: str) -> None:
        """
        Run version discovery for a service once and record the result.

        Failures are logged and the catalog endpoint is used instead, except
        for identity where they are fatal.
        """
        official = get_service_authority().get_official_type(str(service_type))
        base = self.catalog.get_catalog_endpoint(official, self.region)
        if base is None:
            return
        try:
            endpoints = await discover(self, official, base.url)
        except DiscoveryError as e:
            if official == ServiceType.IDENTITY.value:
                raise
            log_with_source(
                logger, "catalog", "warning", "Version discovery failed, using catalog endpoint",
                service_type=official, error=e.message,
            )
            endpoints = []
        self.catalog.add_discovered(official, endpoints)

    async def get_service_endpoint(
        self, service_type: ServiceType | str, version: ApiVersion | None = None,
    ) -> ServiceEndpoint:
        """
        Endpoint for a service, discovering its versions on first use.

        Raises:
            CatalogError: If the service has no matching endpoint
        """
        service_type = str(service_type)
        if self.catalog.discovery_allowed(service_type) and not self.catalog.is_discovered(service_type):
            await self.discover_service_endpoint(service_type)
        return self.catalog.get_service_endpoint(service_type, version, self.region)
