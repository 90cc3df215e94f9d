"""Content filtering and authorization services."""
