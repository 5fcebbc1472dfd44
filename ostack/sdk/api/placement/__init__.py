"""Placement bindings."""
