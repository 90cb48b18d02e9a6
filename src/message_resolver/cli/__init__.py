"""Command-line interface for the message resolver."""
