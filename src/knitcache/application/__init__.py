"""Application layer wiring features to infrastructure."""
