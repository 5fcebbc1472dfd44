"""Block Storage (Cinder) v3 bindings."""
