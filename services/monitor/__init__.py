"""Price monitor service."""
