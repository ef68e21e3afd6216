"""Core building blocks: configuration, error taxonomy, retry decisions, logging."""
