"""Flask CLI commands."""
