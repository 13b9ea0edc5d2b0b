"""CLI commands for the trade journal.

This package provides the command-line interface: setup and profile
management, trade logging, and analytics reports.
"""

from tradejournal.cli.main import cli, main

__all__ = ["cli", "main"]
