"""Stacksmith CLI: Typer-based command-line interface.

Provides the ``stacksmith`` command with ``plan`` and ``deploy``
subcommands.  All output uses Rich for formatted terminal display.
"""
