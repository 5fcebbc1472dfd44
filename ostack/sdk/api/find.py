"""
Resource Lookup by ID or Name.

find() first GETs the resource by id. When the service answers 404 it lists
resources filtered by name instead and requires exactly one match.

Usage:
    network = await find(Findable(GetNetwork(id=ref), ListNetworks(name=ref))).query(session)
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ostack.core.exceptions import IdNotUniqueError, ResourceNotFoundError
from ostack.core.logging import get_logger, log_with_source
from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.api.paged import paged

if TYPE_CHECKING:
    from ostack.sdk.session import AsyncOpenStack

logger = get_logger(__name__)


@dataclass
class Findable:
    """Pair of endpoints used to locate a resource: GET by id and list by name."""

    get_ep: RestEndpoint
    list_ep: RestEndpoint
    name: str | None = None

    def locate_resource_in_list(self, data: list[Any]) -> Any:
        if self.name is not None:
            # Services without a name filter: match on the client side
            data = [item for item in data if isinstance(item, dict) and item.get("name") == self.name]
        if not data:
            raise ResourceNotFoundError()
        if len(data) > 1:
            raise IdNotUniqueError()
        return data[0]


class Find:
    def __init__(self, findable: Findable) -> None:
        self.findable = findable

    async def query(self, session: "AsyncOpenStack") -> Any:
        try:
            return await self.findable.get_ep.query(session)
        except ResourceNotFoundError:
            log_with_source(
                logger,
                "sdk",
                "debug",
                "Resource not found by id, searching by name",
                endpoint=type(self.findable.list_ep).__name__,
            )
        data = await paged(self.findable.list_ep).query(session)
        return self.findable.locate_resource_in_list(data)


def find(findable: Findable) -> Find:
    return Find(findable)
