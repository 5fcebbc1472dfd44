"""
API Layer.

Generic request machinery (endpoint, paged, find) and the per-service
endpoint bindings in the service subpackages.
"""

from ostack.sdk.api.endpoint import Ignore, RestEndpoint, ignore, to_model
from ostack.sdk.api.find import Find, Findable, find
from ostack.sdk.api.paged import Paged, Pagination, paged

__all__ = [
    "Find",
    "Findable",
    "Ignore",
    "Paged",
    "Pagination",
    "RestEndpoint",
    "find",
    "ignore",
    "paged",
    "to_model",
]
