"""
Keystone v3 Authentication.

Builds the "identity" part of a token request from a cloud config and
performs the request.

Supported auth_type values:
    password, v3password                          (default)
    token, v3token
    applicationcredential, v3applicationcredential
    v3multifactor                                 (auth_methods: [v3password, v3totp])

Usage:
    identity = build_identity(cloud_config)
    scope = AuthScope.from_cloud_config(cloud_config)
    token = await authenticate(session, identity, scope)
"""

from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from ostack.core.exceptions import AuthError, AuthMissingDataError
from ostack.core.logging import get_logger, log_with_source
from ostack.sdk.api.endpoint import check_response_error, get_json
from ostack.sdk.api.identity.auth import CreateAuthToken
from ostack.sdk.auth.scope import AuthScope
from ostack.sdk.auth.token import AuthResponse, AuthToken
from ostack.sdk.config import AuthConfig, CloudConfig

if TYPE_CHECKING:
    from ostack.sdk.session import AsyncOpenStack

logger = get_logger(__name__)


class AuthType(str, Enum):
    V3_APPLICATION_CREDENTIAL = "v3applicationcredential"
    V3_PASSWORD = "v3password"
    V3_TOKEN = "v3token"
    V3_TOTP = "v3totp"
    V3_MULTIFACTOR = "v3multifactor"

    @classmethod
    def from_str(cls, value: str) -> "AuthType":
        """
        Resolve an auth_type value.

        Raises:
            AuthError: If the auth type is not supported
        """
        aliases = {
            "applicationcredential": cls.V3_APPLICATION_CREDENTIAL,
            "password": cls.V3_PASSWORD,
            "token": cls.V3_TOKEN,
            "totp": cls.V3_TOTP,
            "multifactor": cls.V3_MULTIFACTOR,
        }
        if value in aliases:
            return aliases[value]
        try:
            return cls(value)
        except ValueError:
            raise AuthError(f"Unsupported auth type `{value}`") from None

    @classmethod
    def from_cloud_config(cls, config: CloudConfig) -> "AuthType":
        if config.auth_type:
            return cls.from_str(config.auth_type)
        return cls.V3_PASSWORD


# =============================================================================
# Identity methods
# =============================================================================


def _require(auth: AuthConfig, name: str) -> Any:
    value = getattr(auth, name)
    if not value:
        raise AuthMissingDataError(name)
    return value


def _user(auth: AuthConfig) -> dict[str, Any]:
    if auth.user_id:
        return {"id": auth.user_id}
    user: dict[str, Any] = {"name": _require(auth, "username")}
    if auth.user_domain_id:
        user["domain"] = {"id": auth.user_domain_id}
    elif auth.user_domain_name:
        user["domain"] = {"name": auth.user_domain_name}
    else:
        raise AuthMissingDataError("user_domain_name")
    return user


def _password_method(auth: AuthConfig) -> dict[str, Any]:
    user = _user(auth)
    user["password"] = _require(auth, "password")
    return {"user": user}


def _totp_method(auth: AuthConfig) -> dict[str, Any]:
    user = _user(auth)
    user["passcode"] = _require(auth, "passcode")
    return {"user": user}


def _token_method(auth: AuthConfig) -> dict[str, Any]:
    return {"id": _require(auth, "token")}


def _application_credential_method(auth: AuthConfig) -> dict[str, Any]:
    secret = _require(auth, "application_credential_secret")
    if auth.application_credential_id:
        return {"id": auth.application_credential_id, "secret": secret}
    return {
        "name": _require(auth, "application_credential_name"),
        "secret": secret,
        "user": _user(auth),
    }


_METHODS = {
    AuthType.V3_PASSWORD: ("password", _password_method),
    AuthType.V3_TOKEN: ("token", _token_method),
    AuthType.V3_TOTP: ("totp", _totp_method),
    AuthType.V3_APPLICATION_CREDENTIAL: ("application_credential", _application_credential_method),
}


def build_identity(config: CloudConfig) -> dict[str, Any]:
    """
    Build the "identity" object of a token request.

    Raises:
        AuthMissingDataError: If a required attribute is missing
        AuthError: If the auth type is not supported
    """
    if config.auth is None:
        raise AuthMissingDataError("auth")
    auth_type = AuthType.from_cloud_config(config)

    if auth_type is AuthType.V3_MULTIFACTOR:
        if not config.auth_methods:
            raise AuthMissingDataError("auth_methods")
        types = [AuthType.from_str(m) for m in config.auth_methods]
    else:
        types = [auth_type]

    identity: dict[str, Any] = {"methods": []}
    for method_type in types:
        if method_type not in _METHODS:
            raise AuthError(f"Auth type `{method_type.value}` cannot be used here")
        name, builder = _METHODS[method_type]
        identity["methods"].append(name)
        identity[name] = builder(config.auth)
    return identity


def build_token_identity(token: AuthToken) -> dict[str, Any]:
    """Identity that authenticates with an existing token (used to re-scope)."""
    return {"methods": ["token"], "token": {"id": token.token}}


# =============================================================================
# Token request
# =============================================================================


async def authenticate(
    session: "AsyncOpenStack",
    identity: dict[str, Any],
    scope: AuthScope,
) -> AuthToken:
    """
    Request a token from Keystone.

    Application credentials carry their own scope, so no scope is sent
    with them.

    Raises:
        AuthError: When Keystone rejects the credentials (401)
        ApiError: For other failures
    """
    scope_request = None
    if "application_credential" not in identity["methods"]:
        scope_request = scope.to_request()

    endpoint = CreateAuthToken(identity=identity, scope=scope_request)
    log_with_source(
        logger, "auth", "debug", "Requesting token",
        methods=identity["methods"], scope=scope_request,
    )
    response = await endpoint.raw_query(session, inspect_error=False)
    if response.status_code == 401:
        raise AuthError(f"Authentication failed: {response.text or 'unauthorized'}")
    check_response_error(response)

    token = response.headers.get("X-Subject-Token")
    if not token:
        raise AuthError("Keystone response has no X-Subject-Token header")
    try:
        auth_info = AuthResponse.model_validate(get_json(response))
    except ValidationError as e:
        raise AuthError(f"Cannot parse the token response: {e}") from e

    log_with_source(
        logger, "auth", "info", "Authenticated",
        expires_at=auth_info.token.expires_at.isoformat(),
        project=auth_info.token.project.name if auth_info.token.project else None,
    )
    return AuthToken(token=token, auth_info=auth_info)
