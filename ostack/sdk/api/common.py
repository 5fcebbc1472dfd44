"""
Shared Binding Types.

ResourceRecord is the base of the typed response records used for output.
ActionEndpoint is the base of "POST <resource>/{id}/action" style requests
(compute servers and aggregates, block-storage volumes).
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict

from ostack.sdk.api.endpoint import RestEndpoint
from ostack.sdk.params import json_body


class ResourceRecord(BaseModel):
    """
    Typed view of a resource as returned by the service.

    Unknown keys are kept. Column names are the JSON keys (aliases where the
    key is not a valid identifier, e.g. "OS-EXT-STS:vm_state").

    Class attributes:
        view_key: Key of the output view in views.yaml ("compute.server")
        wide_fields: Fields shown only with "-o wide"
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    view_key: ClassVar[str] = ""
    wide_fields: ClassVar[frozenset[str]] = frozenset()

    @classmethod
    def column_name(cls, field_name: str) -> str:
        info = cls.model_fields[field_name]
        return info.alias or field_name

    @classmethod
    def columns(cls, wide: bool = False) -> list[str]:
        """JSON keys of the declared fields, without wide fields unless requested."""
        return [
            cls.column_name(name)
            for name in cls.model_fields
            if wide or name not in cls.wide_fields
        ]


class ActionEndpoint(RestEndpoint):
    """Resource action: POST {"<action>": <action_body()>}."""

    method: ClassVar[str] = "POST"
    action: ClassVar[str]

    def action_body(self) -> Any:
        return None

    def body(self) -> tuple[str, bytes]:
        return json_body({self.action: self.action_body()})
