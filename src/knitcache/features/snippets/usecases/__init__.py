"""Registry and ordering use cases."""
