"""Fingerprint and cache entry models."""
