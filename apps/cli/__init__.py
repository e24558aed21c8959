"""Command line interface for income tax estimates."""

from apps.cli.main import main

__all__ = ["main"]
