"""Container Infrastructure (Magnum) clusters and cluster templates."""

from typing import ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.find import Findable
from ostack.sdk.types import ServiceType


class ListClusters(RestEndpoint):
    path = "v1/clusters"
    service_type = ServiceType.CONTAINER_INFRASTRUCTURE_MANAGEMENT
    response_key = "clusters"
    query_fields = {"limit": "limit", "marker": "marker", "sort_dir": "sort_dir", "sort_key": "sort_key"}

    limit: int | None = None
    marker: str | None = None
    sort_dir: str | None = None
    sort_key: str | None = None


class GetCluster(RestEndpoint):
    path = "v1/clusters/{id}"
    service_type = ServiceType.CONTAINER_INFRASTRUCTURE_MANAGEMENT

    id: str


class DeleteCluster(RestEndpoint):
    method = "DELETE"
    path = "v1/clusters/{id}"
    service_type = ServiceType.CONTAINER_INFRASTRUCTURE_MANAGEMENT

    id: str


class Cluster(ResourceRecord):
    view_key: ClassVar[str] = "container_infra.cluster"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "cluster_template_id", "create_timeout", "keypair", "stack_id", "status_reason",
    })

    uuid: str
    name: str | None = None
    status: str | None = None
    health_status: str | None = None
    master_count: int | None = None
    node_count: int | None = None
    cluster_template_id: str | None = None
    create_timeout: int | None = None
    keypair: str | None = None
    stack_id: str | None = None
    status_reason: str | None = None


def find_cluster(ref: str) -> Findable:
    # Magnum resolves names itself on GET v1/clusters/{ident}
    return Findable(GetCluster(id=ref), ListClusters(), name=ref)


class ListClusterTemplates(RestEndpoint):
    path = "v1/clustertemplates"
    service_type = ServiceType.CONTAINER_INFRASTRUCTURE_MANAGEMENT
    response_key = "clustertemplates"
    query_fields = {"limit": "limit", "marker": "marker", "sort_dir": "sort_dir", "sort_key": "sort_key"}

    limit: int | None = None
    marker: str | None = None
    sort_dir: str | None = None
    sort_key: str | None = None


class GetClusterTemplate(RestEndpoint):
    path = "v1/clustertemplates/{id}"
    service_type = ServiceType.CONTAINER_INFRASTRUCTURE_MANAGEMENT

    id: str


class ClusterTemplate(ResourceRecord):
    view_key: ClassVar[str] = "container_infra.cluster_template"
    wide_fields: ClassVar[frozenset[str]] = frozenset({
        "docker_volume_size", "external_network_id", "flavor_id", "master_flavor_id", "network_driver",
    })

    uuid: str
    name: str | None = None
    coe: str | None = None
    image_id: str | None = None
    public: bool | None = None
    docker_volume_size: int | None = None
    external_network_id: str | None = None
    flavor_id: str | None = None
    master_flavor_id: str | None = None
    network_driver: str | None = None


def find_cluster_template(ref: str) -> Findable:
    return Findable(GetClusterTemplate(id=ref), ListClusterTemplates(), name=ref)
