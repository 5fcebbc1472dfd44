"""
Token Cache.

Keeps the tokens of a session per scope and persists them as JSON in
<cache_dir>/<identity hash> so that consecutive CLI invocations reuse a
valid token instead of authenticating again.

File format:
    {"auths": [{"scope": {...}, "token": {"token": "...", "auth_info": {...}}}]}
"""

import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from ostack.core.logging import get_logger, log_with_source
from ostack.sdk.auth.scope import AuthScope
from ostack.sdk.auth.token import AuthState, AuthToken

logger = get_logger(__name__)


class ScopeAuth(BaseModel):
    scope: AuthScope
    token: AuthToken


class StateFile(BaseModel):
    auths: list[ScopeAuth] = Field(default_factory=list)


def _valid(entries: list[ScopeAuth]) -> list[ScopeAuth]:
    return [e for e in entries if e.token.get_state() is AuthState.VALID]


class State:
    """In-memory token map, optionally backed by a file."""

    def __init__(
        self,
        base_dir: Path,
        auth_hash: str = "",
        cache_enabled: bool = True,
    ) -> None:
        self.base_dir = base_dir
        self.auth_hash = auth_hash
        self.cache_enabled = cache_enabled
        self._auths: list[ScopeAuth] = []

    @property
    def state_file(self) -> Path:
        return self.base_dir / self.auth_hash

    def set_auth_state(self, scope: AuthScope, token: AuthToken) -> None:
        self._auths = [e for e in _valid(self._auths) if e.scope != scope]
        self._auths.append(ScopeAuth(scope=scope, token=token))
        if self.cache_enabled:
            self._save(scope, token)

    def get_auth_state(self, scope: AuthScope) -> AuthToken | None:
        """Valid token for the scope, from memory or the cache file."""
        self._auths = _valid(self._auths)
        for entry in self._auths:
            if scope.matches(entry.scope):
                return entry.token
        if not self.cache_enabled:
            return None
        for entry in self._load():
            if scope.matches(entry.scope):
                log_with_source(logger, "auth", "debug", "Using cached token", scope=scope.kind)
                self._auths.append(entry)
                return entry.token
        return None

    def get_any_valid_auth(self) -> AuthToken | None:
        """An unscoped token if there is one, else any valid token."""
        candidates = _valid(self._auths) or (self._load() if self.cache_enabled else [])
        for entry in candidates:
            if entry.scope.kind == "unscoped":
                return entry.token
        return candidates[0].token if candidates else None

    def _load(self) -> list[ScopeAuth]:
        path = self.state_file
        if not self.auth_hash or not path.is_file():
            return []
        try:
            return _valid(StateFile.model_validate_json(path.read_text()).auths)
        except (OSError, ValidationError, ValueError) as e:
            log_with_source(
                logger, "auth", "warning", "Corrupted token cache file, removing",
                path=str(path), error=str(e),
            )
            path.unlink(missing_ok=True)
            return []

    def _save(self, scope: AuthScope, token: AuthToken) -> None:
        if not self.auth_hash:
            return
        entries = [e for e in self._load() if e.scope != scope]
        entries.append(ScopeAuth(scope=scope, token=token))
        path = self.state_file
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(StateFile(auths=entries).model_dump_json())
            os.chmod(path, 0o600)
        except OSError as e:
            log_with_source(
                logger, "auth", "warning", "Cannot write token cache",
                path=str(path), error=str(e),
            )

    def clear(self) -> None:
        self._auths = []
        if self.cache_enabled and self.auth_hash:
            self.state_file.unlink(missing_ok=True)
