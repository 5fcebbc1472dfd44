"""
Service Type Authority.

Maps official OpenStack service types to their historical aliases
(volumev3 → block-storage, octavia → load-balancer, ...). The data ships
with the package as service_types.json.

Usage:
    from ostack.sdk.service_authority import get_service_authority

    authority = get_service_authority()
    authority.get_official_type("volumev3")               # "block-storage"
    authority.get_all_types_by_service_type("compute")    # ["compute"]
"""

import json
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

DATA_FILE = Path(__file__).resolve().parent / "service_types.json"


@dataclass
class ServiceAuthority:
    """Forward (type → aliases) and reverse (alias → type) service type maps."""

    forward: dict[str, list[str]] = field(default_factory=dict)
    reverse: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_data(cls, data: dict) -> "ServiceAuthority":
        authority = cls()
        for service in data.get("services", []):
            service_type = service["service_type"]
            aliases = list(service.get("aliases") or [])
            authority.forward[service_type] = aliases
            for alias in aliases:
                authority.reverse[alias] = service_type
        return authority

    def get_all_types_by_service_type(self, service_type: str) -> list[str]:
        """
        Return the official type followed by all its aliases.

        Raises:
            KeyError: If the service type is unknown
        """
        official = self.get_official_type(service_type)
        if official not in self.forward:
            raise KeyError(f"unknown service {service_type}")
        return [official, *self.forward[official]]

    def get_official_type(self, service_type: str) -> str:
        """Return the official type for an alias. Unknown types map to themselves."""
        return self.reverse.get(service_type, service_type)

    def is_known(self, service_type: str) -> bool:
        return self.get_official_type(service_type) in self.forward


@lru_cache
def get_service_authority() -> ServiceAuthority:
    """Load the packaged service type data (cached)."""
    with open(DATA_FILE) as f:
        return ServiceAuthority.from_data(json.load(f))
