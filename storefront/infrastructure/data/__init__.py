"""REST endpoints and repositories."""
