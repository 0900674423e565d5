"""Persistence layer backed by SQLite."""
