"""Keystone v3 authentication: scopes, tokens and identity methods."""

from ostack.sdk.auth.identity import AuthType, authenticate, build_identity, build_token_identity
from ostack.sdk.auth.scope import AuthScope, ScopeDomain, ScopeProject
from ostack.sdk.auth.token import AuthResponse, AuthState, AuthToken

__all__ = [
    "AuthResponse",
    "AuthScope",
    "AuthState",
    "AuthToken",
    "AuthType",
    "ScopeDomain",
    "ScopeProject",
    "authenticate",
    "build_identity",
    "build_token_identity",
]
