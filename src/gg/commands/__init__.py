"""Command implementations for the gg CLI."""
