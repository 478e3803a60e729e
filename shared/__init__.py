"""Authentication and HTTP middleware shared by the API services."""
