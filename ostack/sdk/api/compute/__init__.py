"""Compute (Nova) bindings. Paths are relative to the versioned compute endpoint."""
