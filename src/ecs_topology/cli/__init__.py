"""Command line interface for topology synthesis."""
