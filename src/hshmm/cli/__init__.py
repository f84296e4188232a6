"""
Command-line interface for hshmm.
"""

from .main import app, cli_main

__all__ = ["app", "cli_main"]
