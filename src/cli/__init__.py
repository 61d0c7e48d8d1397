"""Command-line interface for benchdb."""
