"""Configuration loading, derived settings, and path policy."""
