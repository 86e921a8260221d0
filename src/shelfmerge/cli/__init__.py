"""Command-line interface for shelfmerge."""
