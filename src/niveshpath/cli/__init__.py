"""Command-line interface for niveshpath."""
