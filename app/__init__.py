"""Command-line entry point for path guidance."""
