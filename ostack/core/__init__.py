"""
Core Infrastructure.

Configuration loading, structured logging, the exception hierarchy and
small shared helpers used by the SDK, CLI and TUI.
"""
