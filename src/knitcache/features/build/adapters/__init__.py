"""Execution engine adapters."""
