"""Command-line interface for the adaptive practice engine."""
