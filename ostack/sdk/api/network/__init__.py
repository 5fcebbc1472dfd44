"""Network (Neutron) v2.0 bindings."""
