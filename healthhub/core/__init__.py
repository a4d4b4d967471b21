"""Core components: domain model, store, scoring, services."""
