"""ostui terminal dashboard."""
