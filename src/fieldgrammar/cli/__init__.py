"""Command line interface for fieldgrammar."""
