"""Core run orchestration, configuration, and application paths."""
