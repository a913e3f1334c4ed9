"""Core logic: local state, validation, reconciliation and execution."""
