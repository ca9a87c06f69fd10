"""Command-line interface for taskpilot."""

from .app import app

__all__ = ["app"]
