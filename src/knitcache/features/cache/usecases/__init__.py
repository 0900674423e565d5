"""Cache store use cases and ports."""
