"""
Interface module - External interfaces to Credo SQL.

This module contains:
- cli.py: Command-line interface
"""

from credo_sql.interface.cli import app as cli_app

__all__ = [
    "cli_app",
]
