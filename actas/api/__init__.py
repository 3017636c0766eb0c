"""Flask blueprint, page templates and JSON endpoints."""
