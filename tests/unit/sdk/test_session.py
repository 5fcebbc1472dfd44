"""
Unit Tests for the OpenStack Session.

Authentication, scope switching, token renewal, the token cache and
service endpoint resolution against FakeCloud.
"""

from datetime import timedelta

import pytest

from ostack.core.exceptions import AuthError, AuthMissingDataError, DiscoveryError
from ostack.sdk.api.network.networks import ListNetworks
from ostack.sdk.auth import AuthScope, AuthState
from ostack.sdk.session import AsyncOpenStack

NETWORK_VERSIONS = {
    "versions": [{
        "id": "v2.0",
        "status": "CURRENT",
        "links": [{"rel": "self", "href": "http://neutron-server:9696/v2.0/"}],
    }]
}


class TestConnect:
    """Tests for the initial authorization."""

    @pytest.mark.asyncio
    async def test_connect_scopes_to_configured_project(self, fake_cloud):
        session = await fake_cloud.connect()

        assert session.project_id == fake_cloud.project_id
        assert session.user_id == fake_cloud.user_id
        assert session.region == "RegionOne"
        assert session.get_auth_token() == "token-1"
        assert session.get_auth_state() is AuthState.VALID
        assert fake_cloud.token_requests[0]["scope"] == {
            "project": {"name": "demo", "domain": {"name": "Default"}},
        }
        await session.close()

    @pytest.mark.asyncio
    async def test_wrong_password(self, fake_cloud):
        with pytest.raises(AuthError, match="Authentication failed"):
            await fake_cloud.connect(fake_cloud.cloud_config(auth={"password": "wrong"}))

    @pytest.mark.asyncio
    async def test_unknown_project(self, fake_cloud):
        with pytest.raises(AuthError):
            await fake_cloud.connect(fake_cloud.cloud_config(auth={"project_name": "nope"}))

    @pytest.mark.asyncio
    async def test_missing_user_domain(self, fake_cloud):
        config = fake_cloud.cloud_config(auth={"user_domain_name": None})
        with pytest.raises(AuthMissingDataError):
            await fake_cloud.connect(config)
        assert fake_cloud.token_requests == []

    @pytest.mark.asyncio
    async def test_identity_discovery_failure_is_fatal(self, fake_cloud):
        fake_cloud.routes.clear()
        with pytest.raises(DiscoveryError, match="Service is not working"):
            await fake_cloud.connect()

    @pytest.mark.asyncio
    async def test_unscoped_token_has_no_catalog(self, fake_cloud):
        config = fake_cloud.cloud_config(auth={"project_name": None, "project_domain_name": None})
        session = await fake_cloud.connect(config)
        assert session.project_id is None
        assert session.get_token_catalog() == []
        await session.close()


class TestEndpoints:
    """Tests for service endpoint resolution."""

    @pytest.mark.asyncio
    async def test_discovery_runs_once(self, fake_cloud):
        fake_cloud.add("GET", "https://network.example/", json=NETWORK_VERSIONS)
        fake_cloud.add("GET", "https://network.example/v2.0/networks", json={"networks": []})
        session = await fake_cloud.connect()

        await ListNetworks().query(session)
        await ListNetworks().query(session)

        endpoint = await session.get_service_endpoint("network")
        assert endpoint.url == "https://network.example/v2.0/"
        discovery = [r for r in fake_cloud.requests if str(r.url) == "https://network.example/"]
        assert len(discovery) == 1
        await session.close()

    @pytest.mark.asyncio
    async def test_failed_discovery_falls_back_to_catalog(self, fake_cloud):
        session = await fake_cloud.connect()
        endpoint = await session.get_service_endpoint("compute")
        assert endpoint.url == "https://compute.example/v2.1"
        await session.close()

    @pytest.mark.asyncio
    async def test_endpoint_override_skips_discovery(self, fake_cloud):
        fake_cloud.add("GET", "https://neutron.override/v2.0/networks", json={"networks": [{"id": "n1"}]})
        config = fake_cloud.cloud_config(network_endpoint_override="https://neutron.override/")
        session = await fake_cloud.connect(config)

        assert await ListNetworks().query(session) == [{"id": "n1"}]
        assert fake_cloud.requests_to("GET", "https://network.example") == []
        await session.close()

    @pytest.mark.asyncio
    async def test_alias_resolves_to_official_service(self, fake_cloud):
        session = await fake_cloud.connect()
        endpoint = await session.get_service_endpoint("volumev3")
        assert endpoint.url == f"https://volume.example/v3/{fake_cloud.project_id}"
        await session.close()


class TestScopeSwitch:
    """Tests for re-scoping with the current token."""

    @pytest.mark.asyncio
    async def test_reauthorize_other_project(self, fake_cloud):
        session = await fake_cloud.connect()
        await session.reauthorize(AuthScope.for_project(id=fake_cloud.other_project_id))

        assert session.project_id == fake_cloud.other_project_id
        assert fake_cloud.token_requests[-1]["identity"] == {"methods": ["token"], "token": {"id": "token-1"}}
        endpoint = await session.get_service_endpoint("block-storage")
        assert fake_cloud.other_project_id in endpoint.url
        await session.close()

    @pytest.mark.asyncio
    async def test_switch_back_uses_known_token(self, fake_cloud):
        session = await fake_cloud.connect()
        await session.reauthorize(AuthScope.for_project(id=fake_cloud.other_project_id))
        await session.reauthorize(AuthScope.for_project(id=fake_cloud.project_id))

        assert session.get_auth_token() == "token-1"
        assert len(fake_cloud.token_requests) == 2
        await session.close()

    @pytest.mark.asyncio
    async def test_reauthorize_without_token(self, fake_cloud):
        session = AsyncOpenStack(fake_cloud.cloud_config(), cache_enabled=False)
        with pytest.raises(AuthError):
            await session.reauthorize(AuthScope.for_project(id=fake_cloud.other_project_id))
        await session.close()


class TestRenewal:
    """Tests for token expiry handling."""

    @pytest.mark.asyncio
    async def test_renew_when_about_to_expire(self, fake_cloud):
        fake_cloud.token_lifetime = timedelta(seconds=30)
        session = await fake_cloud.connect()
        offset = timedelta(minutes=1)
        assert session.get_auth_state(offset) is AuthState.ABOUT_TO_EXPIRE

        await session.renew_if_needed(offset)

        assert session.get_auth_token() == "token-2"
        assert session.project_id == fake_cloud.project_id
        assert fake_cloud.token_requests[-1]["scope"] == {"project": {"id": fake_cloud.project_id}}
        await session.close()

    @pytest.mark.asyncio
    async def test_no_renewal_for_valid_token(self, fake_cloud):
        session = await fake_cloud.connect()
        await session.renew_if_needed(timedelta(minutes=1))
        assert session.get_auth_token() == "token-1"
        await session.close()


class TestTokenCache:
    """Tests for token reuse across sessions."""

    @pytest.mark.asyncio
    async def test_second_session_reuses_cached_token(self, fake_cloud):
        first = await fake_cloud.connect(cache_enabled=True)
        await first.close()
        second = await fake_cloud.connect(cache_enabled=True)

        assert second.get_auth_token() == "token-1"
        assert len(fake_cloud.token_requests) == 1
        assert second.project_id == fake_cloud.project_id
        await second.close()

    @pytest.mark.asyncio
    async def test_renew_auth_ignores_cache(self, fake_cloud):
        first = await fake_cloud.connect(cache_enabled=True)
        await first.close()
        second = await AsyncOpenStack.connect(
            fake_cloud.cloud_config(), transport=fake_cloud.transport, cache_enabled=True, renew_auth=True,
        )
        assert second.get_auth_token() == "token-2"
        await second.close()

    @pytest.mark.asyncio
    async def test_renew_auth_drops_cached_scopes(self, fake_cloud):
        first = await fake_cloud.connect(cache_enabled=True)
        await first.reauthorize(AuthScope.for_project(id=fake_cloud.other_project_id))
        await first.close()
        renewed = await AsyncOpenStack.connect(
            fake_cloud.cloud_config(), transport=fake_cloud.transport, cache_enabled=True, renew_auth=True,
        )
        await renewed.close()

        third = await fake_cloud.connect(cache_enabled=True)
        assert third.get_auth_token() == "token-3"
        await third.reauthorize(AuthScope.for_project(id=fake_cloud.other_project_id))
        assert third.get_auth_token() == "token-4"
        await third.close()

    @pytest.mark.asyncio
    async def test_cache_disabled(self, fake_cloud):
        first = await fake_cloud.connect()
        await first.close()
        second = await fake_cloud.connect()
        assert second.get_auth_token() == "token-2"
        await second.close()
