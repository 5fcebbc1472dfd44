"""
Keystone Tokens.

AuthResponse mirrors the body of POST /v3/auth/tokens; AuthToken pairs it
with the X-Subject-Token value and tracks expiry.
"""

from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ostack.core.utils import parse_timestamp, utc_now
from ostack.sdk.auth.scope import AuthScope


class _AuthBase(BaseModel):
    model_config = ConfigDict(extra="allow")


class IdName(_AuthBase):
    id: str | None = None
    name: str | None = None


class TokenProject(IdName):
    domain: IdName | None = None


class TokenUser(IdName):
    domain: IdName | None = None
    password_expires_at: str | None = None


class TokenData(_AuthBase):
    """The "token" object of an auth response."""

    audit_ids: list[str] = Field(default_factory=list)
    methods: list[str] = Field(default_factory=list)
    expires_at: datetime
    issued_at: datetime | None = None
    user: TokenUser | None = None
    project: TokenProject | None = None
    domain: IdName | None = None
    roles: list[IdName] = Field(default_factory=list)
    catalog: list[dict[str, Any]] | None = None
    is_domain: bool | None = None
    system: dict[str, Any] | None = None

    @field_validator("expires_at", "issued_at", mode="before")
    @classmethod
    def _parse_datetime(cls, value: Any) -> Any:
        if isinstance(value, str):
            return parse_timestamp(value)
        return value


class AuthResponse(_AuthBase):
    token: TokenData


class AuthState(str, Enum):
    VALID = "valid"
    EXPIRED = "expired"
    ABOUT_TO_EXPIRE = "about_to_expire"
    UNSET = "unset"


class AuthToken(BaseModel):
    """A token string with the auth response it came with."""

    token: str
    auth_info: AuthResponse | None = None

    def __repr__(self) -> str:
        return f"AuthToken(expires_at={self.expires_at!r}, scope={self.get_scope()!r})"

    @property
    def expires_at(self) -> datetime | None:
        return self.auth_info.token.expires_at if self.auth_info else None

    @property
    def catalog(self) -> list[dict[str, Any]]:
        if self.auth_info is None:
            return []
        return self.auth_info.token.catalog or []

    def get_state(self, offset: timedelta | None = None) -> AuthState:
        """
        Validity of the token.

        Args:
            offset: Tokens expiring within this period are ABOUT_TO_EXPIRE
        """
        if self.auth_info is None:
            return AuthState.UNSET
        now = utc_now()
        expires_at = self.auth_info.token.expires_at
        if expires_at <= now:
            return AuthState.EXPIRED
        if offset is not None and expires_at <= now + offset:
            return AuthState.ABOUT_TO_EXPIRE
        return AuthState.VALID

    def get_scope(self) -> AuthScope:
        if self.auth_info is None:
            return AuthScope.unscoped()
        return AuthScope.from_token_data(
            self.auth_info.token.model_dump(include={"project", "domain"}, exclude_none=True)
        )

    def auth_headers(self) -> dict[str, str]:
        return {"X-Auth-Token": self.token}
