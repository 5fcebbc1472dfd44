"""
OpenStack client toolkit.

- core/: Configuration, logging, exceptions, shared utilities
- sdk/: Async OpenStack SDK (auth, catalog, endpoint bindings)
- cli/: Command-line client (Typer + Rich)
- tui/: Terminal dashboard (Textual)
"""

__version__ = "0.4.0"
