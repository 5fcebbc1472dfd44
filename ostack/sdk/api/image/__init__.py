"""Image (Glance) v2 bindings."""
