"""
CLI Commands.

Organized by service.
"""

from ostack.cli.commands.api import api_command
from ostack.cli.commands.auth import app as auth_app
from ostack.cli.commands.block_storage import app as block_storage_app
from ostack.cli.commands.catalog import app as catalog_app
from ostack.cli.commands.compute import app as compute_app
from ostack.cli.commands.container_infra import app as container_infra_app
from ostack.cli.commands.dns import app as dns_app
from ostack.cli.commands.identity import app as identity_app
from ostack.cli.commands.image import app as image_app
from ostack.cli.commands.load_balancer import app as load_balancer_app
from ostack.cli.commands.network import app as network_app
from ostack.cli.commands.object_store import app as object_store_app
from ostack.cli.commands.placement import app as placement_app
from ostack.cli.commands.system import app as system_app

__all__ = [
    "api_command",
    "auth_app",
    "block_storage_app",
    "catalog_app",
    "compute_app",
    "container_infra_app",
    "dns_app",
    "identity_app",
    "image_app",
    "load_balancer_app",
    "network_app",
    "object_store_app",
    "placement_app",
    "system_app",
]
