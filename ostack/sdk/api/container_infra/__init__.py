"""Container Infrastructure Management (Magnum) v1 bindings."""
