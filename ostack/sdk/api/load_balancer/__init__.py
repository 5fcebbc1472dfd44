"""Load Balancer (Octavia) v2 bindings."""
