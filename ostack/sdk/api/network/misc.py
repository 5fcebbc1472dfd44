"""Network quotas, API extensions and agents."""

from typing import ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.types import ServiceType


class GetQuota(RestEndpoint):
    path = "v2.0/quotas/{project_id}"
    service_type = ServiceType.NETWORK
    response_key = "quota"

    project_id: str


class Quota(ResourceRecord):
    view_key: ClassVar[str] = "network.quota"

    network: int | None = None
    subnet: int | None = None
    port: int | None = None
    router: int | None = None
    floatingip: int | None = None
    security_group: int | None = None
    security_group_rule: int | None = None


class ListExtensions(RestEndpoint):
    path = "v2.0/extensions"
    service_type = ServiceType.NETWORK
    response_key = "extensions"


class Extension(ResourceRecord):
    view_key: ClassVar[str] = "network.extension"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"description", "updated"})

    alias: str
    name: str | None = None
    description: str | None = None
    updated: str | None = None


class ListAgents(RestEndpoint):
    path = "v2.0/agents"
    service_type = ServiceType.NETWORK
    response_key = "agents"
    query_fields = {
        "agent_type": "agent_type",
        "alive": "alive",
        "host": "host",
        "limit": "limit",
        "marker": "marker",
    }

    agent_type: str | None = None
    alive: bool | None = None
    host: str | None = None
    limit: int | None = None
    marker: str | None = None


class Agent(ResourceRecord):
    view_key: ClassVar[str] = "network.agent"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"binary", "heartbeat_timestamp", "topic"})

    id: str
    agent_type: str | None = None
    host: str | None = None
    availability_zone: str | None = None
    alive: bool | None = None
    admin_state_up: bool | None = None
    binary: str | None = None
    heartbeat_timestamp: str | None = None
    topic: str | None = None
