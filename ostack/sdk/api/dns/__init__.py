"""DNS (Designate) v2 bindings."""
