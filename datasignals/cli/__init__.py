"""Datasignals CLI — Typer-based command-line interface.

Provides the ``datasignals`` command with subcommands for running a
demonstration scene and checking signal and group names.

All output uses Rich for formatted terminal display.
"""
