"""Compute keypairs. Keypairs are addressed by name."""

from typing import ClassVar

from ostack.sdk.api.common import ResourceRecord
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.types import ServiceType


class ListKeypairs(RestEndpoint):
    path = "os-keypairs"
    service_type = ServiceType.COMPUTE
    response_key = "keypairs"
    response_list_item_key = "keypair"
    query_fields = {"user_id": "user_id"}

    user_id: str | None = None


class GetKeypair(RestEndpoint):
    path = "os-keypairs/{name}"
    service_type = ServiceType.COMPUTE
    response_key = "keypair"
    query_fields = {"user_id": "user_id"}

    name: str
    user_id: str | None = None


class CreateKeypair(RestEndpoint):
    """Import a public key, or let Nova generate one when public_key is unset."""

    method = "POST"
    path = "os-keypairs"
    service_type = ServiceType.COMPUTE
    response_key = "keypair"
    body_key = "keypair"

    name: str
    public_key: str | None = None
    type: str | None = None


class DeleteKeypair(RestEndpoint):
    method = "DELETE"
    path = "os-keypairs/{name}"
    service_type = ServiceType.COMPUTE
    query_fields = {"user_id": "user_id"}

    name: str
    user_id: str | None = None


class Keypair(ResourceRecord):
    view_key: ClassVar[str] = "compute.keypair"
    wide_fields: ClassVar[frozenset[str]] = frozenset({"public_key", "user_id", "created_at"})

    name: str
    fingerprint: str | None = None
    type: str | None = None
    public_key: str | None = None
    user_id: str | None = None
    created_at: str | None = None
