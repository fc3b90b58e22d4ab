"""Price monitor HTTP API service."""
