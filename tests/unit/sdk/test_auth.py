"""
Unit Tests for Authentication.

Covers identity building per auth type, scope matching, token validity and
the token cache.
"""

from datetime import timedelta

import pytest

from ostack.core.exceptions import AuthError, AuthMissingDataError
from ostack.core.utils import utc_now
from ostack.sdk.auth import AuthResponse, AuthScope, AuthState, AuthToken, AuthType, build_identity
from ostack.sdk.config import AuthConfig, CloudConfig
from ostack.sdk.state import State


def make_token(token="tok", expires_in=timedelta(hours=1), project_id="p1", project_name="demo"):
    data = {"token": {
        "methods": ["password"],
        "expires_at": (utc_now() + expires_in).isoformat() + "Z",
        "user": {"id": "u1", "name": "admin"},
    }}
    if project_id:
        data["token"]["project"] = {"id": project_id, "name": project_name, "domain": {"id": "default"}}
    return AuthToken(token=token, auth_info=AuthResponse.model_validate(data))


# =============================================================================
# Identity
# =============================================================================


class TestBuildIdentity:
    """Tests for the identity part of token requests."""

    def test_password(self):
        config = CloudConfig(auth=AuthConfig(username="admin", password="secret", user_domain_name="Default"))
        assert build_identity(config) == {
            "methods": ["password"],
            "password": {"user": {"name": "admin", "domain": {"name": "Default"}, "password": "secret"}},
        }

    def test_password_with_user_id_needs_no_domain(self):
        config = CloudConfig(auth=AuthConfig(user_id="u1", password="secret"))
        assert build_identity(config)["password"] == {"user": {"id": "u1", "password": "secret"}}

    def test_password_requires_user_domain(self):
        config = CloudConfig(auth=AuthConfig(username="admin", password="secret"))
        with pytest.raises(AuthMissingDataError, match="user_domain_name"):
            build_identity(config)

    def test_password_required(self):
        config = CloudConfig(auth=AuthConfig(username="admin", user_domain_id="default"))
        with pytest.raises(AuthMissingDataError, match="password"):
            build_identity(config)

    def test_token(self):
        config = CloudConfig(auth_type="v3token", auth=AuthConfig(token="abc"))
        assert build_identity(config) == {"methods": ["token"], "token": {"id": "abc"}}

    def test_application_credential_by_id(self):
        config = CloudConfig(
            auth_type="applicationcredential",
            auth=AuthConfig(application_credential_id="ac1", application_credential_secret="s"),
        )
        assert build_identity(config) == {
            "methods": ["application_credential"],
            "application_credential": {"id": "ac1", "secret": "s"},
        }

    def test_multifactor(self):
        config = CloudConfig(
            auth_type="v3multifactor",
            auth_methods=["v3password", "v3totp"],
            auth=AuthConfig(username="admin", password="secret", passcode="123456", user_domain_id="default"),
        )
        identity = build_identity(config)
        assert identity["methods"] == ["password", "totp"]
        assert identity["totp"]["user"]["passcode"] == "123456"

    def test_multifactor_requires_methods(self):
        config = CloudConfig(auth_type="v3multifactor", auth=AuthConfig(username="admin"))
        with pytest.raises(AuthMissingDataError, match="auth_methods"):
            build_identity(config)

    def test_unknown_auth_type(self):
        with pytest.raises(AuthError, match="v3oidc"):
            AuthType.from_str("v3oidc")

    def test_missing_auth_section(self):
        with pytest.raises(AuthMissingDataError):
            build_identity(CloudConfig())


# =============================================================================
# Scope
# =============================================================================


class TestAuthScope:
    """Tests for scope derivation and matching."""

    def test_project_wins_over_domain(self):
        config = CloudConfig(auth=AuthConfig(project_name="demo", project_domain_id="default", domain_name="D"))
        scope = AuthScope.from_cloud_config(config)
        assert scope.kind == "project"
        assert scope.to_request() == {"project": {"name": "demo", "domain": {"id": "default"}}}

    def test_project_id_request_omits_domain(self):
        scope = AuthScope.for_project(id="p1", domain_name="Default")
        assert scope.to_request() == {"project": {"id": "p1"}}

    def test_domain_scope(self):
        scope = AuthScope.from_cloud_config(CloudConfig(auth=AuthConfig(domain_id="d1")))
        assert scope.to_request() == {"domain": {"id": "d1"}}

    def test_unscoped(self):
        assert AuthScope.from_cloud_config(CloudConfig(auth=AuthConfig())).to_request() is None

    def test_match_by_id(self):
        cached = make_token().get_scope()
        assert AuthScope.for_project(id="p1").matches(cached)
        assert not AuthScope.for_project(id="p2").matches(cached)

    def test_name_match_requires_domain(self):
        cached = make_token().get_scope()
        assert AuthScope.for_project(name="demo", domain_id="default").matches(cached)
        assert not AuthScope.for_project(name="demo").matches(cached)
        assert not AuthScope.for_project(name="demo", domain_id="other").matches(cached)

    def test_kind_mismatch(self):
        assert not AuthScope.for_domain(id="default").matches(make_token().get_scope())
        assert AuthScope.unscoped().matches(make_token(project_id=None).get_scope())


# =============================================================================
# Token
# =============================================================================


class TestAuthToken:
    """Tests for token validity."""

    def test_valid(self):
        assert make_token().get_state() is AuthState.VALID

    def test_expired(self):
        assert make_token(expires_in=timedelta(seconds=-1)).get_state() is AuthState.EXPIRED

    def test_about_to_expire(self):
        token = make_token(expires_in=timedelta(seconds=30))
        assert token.get_state(timedelta(minutes=1)) is AuthState.ABOUT_TO_EXPIRE
        assert token.get_state() is AuthState.VALID

    def test_unset(self):
        assert AuthToken(token="x").get_state() is AuthState.UNSET

    def test_repr_hides_token(self):
        assert "tok" not in repr(make_token(token="tok-secret-value"))


# =============================================================================
# Token cache
# =============================================================================


class TestState:
    """Tests for the in-memory and on-disk token cache."""

    def test_memory_only(self, tmp_path):
        state = State(tmp_path, "hash", cache_enabled=False)
        token = make_token()
        state.set_auth_state(token.get_scope(), token)
        assert state.get_auth_state(AuthScope.for_project(id="p1")) is token
        assert not (tmp_path / "hash").exists()

    def test_persisted_between_instances(self, tmp_path):
        token = make_token()
        State(tmp_path, "hash").set_auth_state(token.get_scope(), token)
        cached = State(tmp_path, "hash").get_auth_state(AuthScope.for_project(id="p1"))
        assert cached is not None
        assert cached.token == "tok"
        assert oct((tmp_path / "hash").stat().st_mode & 0o777) == "0o600"

    def test_expired_tokens_ignored(self, tmp_path):
        token = make_token(expires_in=timedelta(seconds=-5))
        state = State(tmp_path, "hash")
        state.set_auth_state(token.get_scope(), token)
        assert State(tmp_path, "hash").get_auth_state(AuthScope.for_project(id="p1")) is None

    def test_corrupted_file_removed(self, tmp_path):
        (tmp_path / "hash").write_text("{not json")
        assert State(tmp_path, "hash").get_auth_state(AuthScope.for_project(id="p1")) is None
        assert not (tmp_path / "hash").exists()

    def test_any_valid_prefers_unscoped(self, tmp_path):
        state = State(tmp_path, "hash", cache_enabled=False)
        scoped = make_token(token="scoped")
        unscoped = make_token(token="unscoped", project_id=None)
        state.set_auth_state(scoped.get_scope(), scoped)
        state.set_auth_state(unscoped.get_scope(), unscoped)
        assert state.get_any_valid_auth().token == "unscoped"

    def test_clear(self, tmp_path):
        token = make_token()
        state = State(tmp_path, "hash")
        state.set_auth_state(token.get_scope(), token)
        state.clear()
        assert state.get_auth_state(AuthScope.for_project(id="p1")) is None
        assert not (tmp_path / "hash").exists()
