"""
OpenStack SDK.

Session, catalog, authentication and the per-service request bindings
(ostack.sdk.api).
"""

from ostack.sdk.config import CloudConfig, ConfigFile
from ostack.sdk.session import AsyncOpenStack
from ostack.sdk.types import ApiVersion, ServiceType

__all__ = ["ApiVersion", "AsyncOpenStack", "CloudConfig", "ConfigFile", "ServiceType"]
