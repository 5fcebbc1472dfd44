"""
Identity Tokens.

    POST v3/auth/tokens      CreateAuthToken (password, token, ... methods)
    GET  v3/auth/tokens      GetAuthToken (validate X-Subject-Token)
    GET  v3/auth/projects    ListAuthProjects (projects the token may be scoped to)
"""

from typing import Any, ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.types import ServiceType


class CreateAuthToken(RestEndpoint):
    method = "POST"
    path = "v3/auth/tokens"
    service_type = ServiceType.IDENTITY
    response_key = "token"
    body_key = "auth"
    query_fields = {"nocatalog": "nocatalog"}

    identity: dict[str, Any]
    scope: dict[str, Any] | None = None
    nocatalog: bool | None = None


class GetAuthToken(RestEndpoint):
    path = "v3/auth/tokens"
    service_type = ServiceType.IDENTITY
    response_key = "token"
    header_fields = {"subject_token": "X-Subject-Token"}
    query_fields = {"allow_expired": "allow_expired", "nocatalog": "nocatalog"}

    subject_token: str
    allow_expired: bool | None = None
    nocatalog: bool | None = None


class ListAuthProjects(RestEndpoint):
    path = "v3/auth/projects"
    service_type = ServiceType.IDENTITY
    response_key = "projects"


class Token(ResourceRecord):
    view_key: ClassVar[str] = "identity.token"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"audit_ids", "catalog", "issued_at", "roles"})

    expires_at: str | None = None
    methods: list[str] | None = None
    user: dict[str, Any] | None = None
    project: dict[str, Any] | None = None
    domain: dict[str, Any] | None = None
    audit_ids: list[str] | None = None
    catalog: list[dict[str, Any]] | None = None
    issued_at: str | None = None
    roles: list[dict[str, Any]] | None = None
