"""Command-line interface for Preflighter."""
