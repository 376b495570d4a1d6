"""
Command Line Interface

Provides the `upilens` command with detect, ingest, config and version
subcommands.
"""
