"""Command-line interface for dirmark."""
