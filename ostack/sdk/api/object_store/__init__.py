"""Object Store (Swift) v1 bindings."""
