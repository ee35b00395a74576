"""Subcommand parsers for the bcr CLI."""
