"""
Authorization Scope.

A token is scoped to a project, to a domain, or unscoped. The scope is
derived from the cloud config (project wins over domain) or from the token
Keystone returned.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from ostack.sdk.config import CloudConfig


class ScopeDomain(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str | None = None
    name: str | None = None

    def to_request(self) -> dict[str, str]:
        return {k: v for k, v in (("id", self.id), ("name", self.name)) if v}


class ScopeProject(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str | None = None
    name: str | None = None
    domain: ScopeDomain | None = None

    def to_request(self) -> dict[str, Any]:
        # Project ids are unique across domains
        if self.id:
            return {"id": self.id}
        data: dict[str, Any] = {"name": self.name}
        if self.domain is not None:
            data["domain"] = self.domain.to_request()
        return data


class AuthScope(BaseModel):
    """Project, domain or unscoped authorization scope."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["project", "domain", "unscoped"] = "unscoped"
    project: ScopeProject | None = None
    domain: ScopeDomain | None = None

    @classmethod
    def unscoped(cls) -> "AuthScope":
        return cls()

    @classmethod
    def for_project(
        cls,
        id: str | None = None,
        name: str | None = None,
        domain_id: str | None = None,
        domain_name: str | None = None,
    ) -> "AuthScope":
        domain = None
        if domain_id or domain_name:
            domain = ScopeDomain(id=domain_id, name=domain_name)
        return cls(kind="project", project=ScopeProject(id=id, name=name, domain=domain))

    @classmethod
    def for_domain(cls, id: str | None = None, name: str | None = None) -> "AuthScope":
        return cls(kind="domain", domain=ScopeDomain(id=id, name=name))

    @classmethod
    def from_cloud_config(cls, config: CloudConfig) -> "AuthScope":
        auth = config.auth
        if auth is None:
            return cls.unscoped()
        if auth.project_id or auth.project_name:
            return cls.for_project(
                id=auth.project_id,
                name=auth.project_name,
                domain_id=auth.project_domain_id,
                domain_name=auth.project_domain_name,
            )
        if auth.domain_id or auth.domain_name:
            return cls.for_domain(id=auth.domain_id, name=auth.domain_name)
        return cls.unscoped()

    @classmethod
    def from_token_data(cls, token: dict[str, Any]) -> "AuthScope":
        """Scope of a token body (the "token" object of an auth response)."""
        project = token.get("project")
        if project:
            return cls(kind="project", project=ScopeProject.model_validate(project))
        domain = token.get("domain")
        if domain:
            return cls(kind="domain", domain=ScopeDomain.model_validate(domain))
        return cls.unscoped()

    def to_request(self) -> dict[str, Any] | None:
        """The "scope" object of a token request, None when unscoped."""
        if self.kind == "project" and self.project is not None:
            return {"project": self.project.to_request()}
        if self.kind == "domain" and self.domain is not None:
            return {"domain": self.domain.to_request()}
        return None

    def matches(self, other: "AuthScope") -> bool:
        """
        Whether a cached token scope satisfies this requested scope.

        Ids match definitely. Names match only when the domain matches too.
        """
        if self.kind != other.kind:
            return False
        if self.kind == "project" and self.project and other.project:
            if self.project.id and self.project.id == other.project.id:
                return True
            if self.project.name and self.project.name == other.project.name:
                requested, cached = self.project.domain, other.project.domain
                if requested is None or cached is None:
                    return False
                if requested.id:
                    return requested.id == cached.id
                return requested.name == cached.name
            return False
        if self.kind == "domain" and self.domain and other.domain:
            if self.domain.id:
                return self.domain.id == other.domain.id
            return self.domain.name == other.domain.name
        return self.kind == "unscoped"

    def cache_key(self) -> str:
        return self.model_dump_json(exclude_none=True)
