"""Identity (Keystone) v3 bindings."""
