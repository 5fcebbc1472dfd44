"""
Compute Servers.

    GET    servers/detail          ListServers
    GET    servers/{id}            GetServer
    POST   servers                 CreateServer
    PUT    servers/{id}            SetServer
    DELETE servers/{id}            DeleteServer
    POST   servers/{id}/action     StartServer, StopServer, RebootServer,
                                   PauseServer, UnpauseServer, LockServer,
                                   UnlockServer
"""

from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, Field

from ostack.sdk.api.common import ActionEndpoint, ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.params import CommaSeparatedList
from ostack.sdk.types import ServiceType


class ListServers(RestEndpoint):
    path = "servers/detail"
    service_type = ServiceType.COMPUTE
    response_key = "servers"
    query_fields = {
        "all_tenants": "all_tenants",
        "availability_zone": "availability_zone",
        "changes_since": "changes-since",
        "flavor": "flavor",
        "host": "host",
        "image": "image",
        "ip": "ip",
        "ip6": "ip6",
        "limit": "limit",
        "locked": "locked",
        "marker": "marker",
        "name": "name",
        "not_tags": "not-tags",
        "project_id": "project_id",
        "sort_dir": "sort_dir",
        "sort_key": "sort_key",
        "status": "status",
        "tags": "tags",
        "tags_any": "tags-any",
        "user_id": "user_id",
    }

    all_tenants: bool | None = None
    availability_zone: str | None = None
    changes_since: str | None = None
    flavor: str | None = None
    host: str | None = None
    image: str | None = None
    ip: str | None = None
    ip6: str | None = None
    limit: int | None = None
    locked: bool | None = None
    marker: str | None = None
    name: str | None = None
    not_tags: CommaSeparatedList | None = None
    project_id: str | None = None
    sort_dir: list[str] | None = None
    sort_key: list[str] | None = None
    status: str | None = None
    tags: CommaSeparatedList | None = None
    tags_any: CommaSeparatedList | None = None
    user_id: str | None = None


class GetServer(RestEndpoint):
    path = "servers/{id}"
    service_type = ServiceType.COMPUTE
    response_key = "server"

    id: str


class ServerNetwork(BaseModel):
    uuid: str | None = None
    port: str | None = None
    fixed_ip: str | None = None
    tag: str | None = None


class CreateServer(RestEndpoint):
    method = "POST"
    path = "servers"
    service_type = ServiceType.COMPUTE
    response_key = "server"
    body_key = "server"

    name: str
    flavor_ref: str = Field(alias="flavorRef")
    image_ref: str | None = Field(default=None, alias="imageRef")
    networks: list[ServerNetwork] | str | None = None
    key_name: str | None = None
    security_groups: list[dict[str, str]] | None = None
    availability_zone: str | None = None
    user_data: str | None = None
    metadata: dict[str, str] | None = None
    description: str | None = None
    config_drive: bool | None = None
    min_count: int | None = None
    max_count: int | None = None


class SetServer(RestEndpoint):
    method = "PUT"
    path = "servers/{id}"
    service_type = ServiceType.COMPUTE
    response_key = "server"
    body_key = "server"
    microversion = "2.19"

    id: str
    name: str | None = None
    description: str | None = None


class DeleteServer(RestEndpoint):
    method = "DELETE"
    path = "servers/{id}"
    service_type = ServiceType.COMPUTE

    id: str


# =============================================================================
# Actions
# =============================================================================


class _ServerAction(ActionEndpoint):
    path = "servers/{id}/action"
    service_type = ServiceType.COMPUTE

    id: str


class StartServer(_ServerAction):
    action = "os-start"


class StopServer(_ServerAction):
    action = "os-stop"


class PauseServer(_ServerAction):
    action = "pause"


class UnpauseServer(_ServerAction):
    action = "unpause"


class UnlockServer(_ServerAction):
    action = "unlock"


class LockServer(_ServerAction):
    action = "lock"
    microversion = "2.73"

    locked_reason: str | None = None

    def action_body(self) -> Any:
        if self.locked_reason is None:
            return None
        return {"locked_reason": self.locked_reason}


class RebootType(str, Enum):
    SOFT = "SOFT"
    HARD = "HARD"


class RebootServer(_ServerAction):
    action = "reboot"

    reboot_type: RebootType = RebootType.SOFT

    def action_body(self) -> Any:
        return {"type": self.reboot_type.value}


# =============================================================================
# Record
# =============================================================================


class Server(ResourceRecord):
    view_key: ClassVar[str] = "compute.server"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "addresses",
        "availability_zone",
        "created",
        "description",
        "flavor",
        "host",
        "host_id",
        "hypervisor_hostname",
        "image",
        "key_name",
        "locked",
        "metadata",
        "power_state",
        "security_groups",
        "tags",
        "task_state",
        "tenant_id",
        "updated",
        "user_id",
        "vm_state",
    })

    id: str
    name: str | None = None
    status: str | None = None
    addresses: dict[str, Any] | None = None
    availability_zone: str | None = Field(default=None, alias="OS-EXT-AZ:availability_zone")
    created: str | None = None
    description: str | None = None
    flavor: dict[str, Any] | None = None
    host: str | None = Field(default=None, alias="OS-EXT-SRV-ATTR:host")
    host_id: str | None = Field(default=None, alias="hostId")
    hypervisor_hostname: str | None = Field(default=None, alias="OS-EXT-SRV-ATTR:hypervisor_hostname")
    image: dict[str, Any] | str | None = None
    key_name: str | None = None
    locked: bool | None = None
    metadata: dict[str, str] | None = None
    power_state: int | None = Field(default=None, alias="OS-EXT-STS:power_state")
    security_groups: list[dict[str, Any]] | None = None
    tags: list[str] | None = None
    task_state: str | None = Field(default=None, alias="OS-EXT-STS:task_state")
    tenant_id: str | None = None
    updated: str | None = None
    user_id: str | None = None
    vm_state: str | None = Field(default=None, alias="OS-EXT-STS:vm_state")


def find_server(ref: str) -> Findable:
    return Findable(GetServer(id=ref), ListServers(name=ref), name=ref)
