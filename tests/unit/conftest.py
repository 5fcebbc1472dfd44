"""
Unit Test Fixtures.

Fixtures for unit tests - no request leaves the process.

FakeCloud answers HTTP requests through httpx.MockTransport: Keystone
issues tokens (with a service catalog) for password and token identities,
and every other request is served from routes registered by the test.
Unrouted URLs answer 404, so service version discovery falls back to the
catalog endpoints.

Usage:
    async def test_list(fake_cloud):
        fake_cloud.add("GET", "https://network.example/v2.0/networks", json={"networks": []})
        session = await fake_cloud.connect()
        ...
"""

import json
from collections.abc import Callable
from datetime import timedelta
from pathlib import Path
from typing import Any

import httpx
import pytest
import yaml

from ostack.core.utils import utc_now
from ostack.sdk.config import AuthConfig, CloudConfig
from ostack.sdk.session import AsyncOpenStack

PROJECT_ID = "5a7e3b1c9d2f4e6a8b0c1d2e3f4a5b6c"
OTHER_PROJECT_ID = "9f8e7d6c5b4a39281706f5e4d3c2b1a0"
USER_ID = "0c1d2e3f4a5b6c7d8e9f0a1b2c3d4e5f"

AUTH_URL = "https://identity.example/v3"

PROJECTS = {
    PROJECT_ID: {"id": PROJECT_ID, "name": "demo", "domain": {"id": "default", "name": "Default"}},
    OTHER_PROJECT_ID: {"id": OTHER_PROJECT_ID, "name": "ops", "domain": {"id": "default", "name": "Default"}},
}

IDENTITY_VERSION = {
    "version": {
        "id": "v3.14",
        "status": "stable",
        "links": [{"rel": "self", "href": "https://identity.example/v3/"}],
    }
}


def catalog_entry(service_type: str, url: str) -> dict[str, Any]:
    return {
        "type": service_type,
        "name": service_type,
        "endpoints": [
            {"interface": "public", "region_id": "RegionOne", "region": "RegionOne", "url": url},
            {"interface": "internal", "region_id": "RegionOne", "region": "RegionOne", "url": url + "/internal"},
        ],
    }


def service_catalog(project_id: str) -> list[dict[str, Any]]:
    return [
        catalog_entry("identity", AUTH_URL),
        catalog_entry("compute", "https://compute.example/v2.1"),
        catalog_entry("network", "https://network.example"),
        catalog_entry("image", "https://image.example"),
        catalog_entry("volumev3", f"https://volume.example/v3/{project_id}"),
        catalog_entry("load-balancer", "https://lb.example"),
        catalog_entry("dns", "https://dns.example"),
        catalog_entry("object-store", f"https://swift.example/v1/AUTH_{project_id}"),
        catalog_entry("placement", "https://placement.example"),
        catalog_entry("container-infra", "https://magnum.example/v1"),
    ]


Responder = Callable[[httpx.Request], httpx.Response]


class FakeCloud:
    """In-process OpenStack cloud for httpx.MockTransport."""

    auth_url = AUTH_URL
    project_id = PROJECT_ID
    other_project_id = OTHER_PROJECT_ID
    user_id = USER_ID

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], list[Responder]] = {}
        self.requests: list[httpx.Request] = []
        self.token_requests: list[dict[str, Any]] = []
        self.token_lifetime = timedelta(hours=1)
        self.token_counter = 0
        self.add("GET", AUTH_URL + "/", json=IDENTITY_VERSION)

    # -------------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------------

    def add(
        self,
        method: str,
        url: str,
        json: Any = None,
        status: int = 200,
        headers: dict[str, str] | None = None,
        content: bytes | None = None,
        responder: Responder | None = None,
    ) -> None:
        """
        Register a response for METHOD url.

        url may include a query string to match only that exact query.
        Registering the same route again queues another response; the last
        one keeps answering.
        """
        if responder is None:
            def responder(request: httpx.Request) -> httpx.Response:
                if content is not None:
                    return httpx.Response(status, headers=headers, content=content)
                if json is None:
                    return httpx.Response(status, headers=headers)
                return httpx.Response(status, headers=headers, json=json)

        self.routes.setdefault((method, url), []).append(responder)

    def catalog(self, project_id: str = PROJECT_ID) -> list[dict[str, Any]]:
        return service_catalog(project_id)

    def requests_to(self, method: str, url_prefix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and str(r.url).startswith(url_prefix)]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if request.method == "POST" and url == AUTH_URL + "/auth/tokens":
            return self._issue_token(request)

        bare = f"{request.url.scheme}://{request.url.host}{request.url.path}"
        for key in ((request.method, url), (request.method, bare)):
            responders = self.routes.get(key)
            if responders:
                responder = responders.pop(0) if len(responders) > 1 else responders[0]
                return responder(request)
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    # -------------------------------------------------------------------------
    # Keystone
    # -------------------------------------------------------------------------

    def _issue_token(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)["auth"]
        self.token_requests.append(body)
        identity = body["identity"]
        if "password" in identity["methods"] and identity["password"]["user"].get("password") != "secret":
            return httpx.Response(401, json={"error": {"code": 401, "message": "The request you have made requires authentication."}})

        project = None
        scope = body.get("scope") or {}
        if "project" in scope:
            requested = scope["project"]
            project = PROJECTS.get(requested.get("id", ""))
            if project is None:
                project = next(
                    (p for p in PROJECTS.values() if p["name"] == requested.get("name")), None,
                )
            if project is None:
                return httpx.Response(401, json={"error": {"code": 401, "message": "No such project"}})

        self.token_counter += 1
        now = utc_now()
        token: dict[str, Any] = {
            "methods": identity["methods"],
            "user": {"id": USER_ID, "name": "admin", "domain": {"id": "default", "name": "Default"}},
            "audit_ids": ["a1"],
            "issued_at": now.isoformat() + "Z",
            "expires_at": (now + self.token_lifetime).isoformat() + "Z",
        }
        if project is not None:
            token["project"] = project
            token["roles"] = [{"id": "r1", "name": "member"}]
            token["catalog"] = service_catalog(project["id"])
        return httpx.Response(
            201,
            headers={"X-Subject-Token": f"token-{self.token_counter}"},
            json={"token": token},
        )

    # -------------------------------------------------------------------------
    # Sessions
    # -------------------------------------------------------------------------

    def cloud_config(self, **overrides: Any) -> CloudConfig:
        auth = {
            "auth_url": AUTH_URL,
            "username": "admin",
            "password": "secret",
            "user_domain_name": "Default",
            "project_name": "demo",
            "project_domain_name": "Default",
        }
        auth.update(overrides.pop("auth", {}))
        return CloudConfig(auth=AuthConfig(**auth), region_name="RegionOne", **overrides)

    async def connect(self, config: CloudConfig | None = None, cache_enabled: bool = False) -> AsyncOpenStack:
        return await AsyncOpenStack.connect(
            config or self.cloud_config(),
            transport=self.transport,
            cache_enabled=cache_enabled,
        )


@pytest.fixture
def fake_cloud() -> FakeCloud:
    """Fake cloud with Keystone and the service catalog of tests/unit/conftest.py."""
    return FakeCloud()


@pytest.fixture
def clouds_file(tmp_path: Path) -> Path:
    """clouds.yaml with the fake cloud as "devstack" and a broken "broken" cloud."""
    path = tmp_path / "clouds.yaml"
    path.write_text(yaml.safe_dump({
        "clouds": {
            "devstack": {
                "auth": {
                    "auth_url": AUTH_URL,
                    "username": "admin",
                    "password": "secret",
                    "user_domain_name": "Default",
                    "project_name": "demo",
                    "project_domain_name": "Default",
                },
                "region_name": "RegionOne",
            },
            "broken": {
                "auth": {"auth_url": AUTH_URL, "username": "admin", "password": "wrong", "user_domain_name": "Default"},
            },
        },
        "cache": {"auth": False},
    }))
    return path
