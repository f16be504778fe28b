"""Infrastructure adapters: persistence and observability."""
