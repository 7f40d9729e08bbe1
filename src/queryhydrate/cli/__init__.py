"""Command-line interface for queryhydrate."""
