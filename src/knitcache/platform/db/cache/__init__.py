"""Cache tables data access objects."""
