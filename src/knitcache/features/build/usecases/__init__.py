"""Build orchestration use cases."""
