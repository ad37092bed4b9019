"""JSON schemas for persisted bizconf documents."""
