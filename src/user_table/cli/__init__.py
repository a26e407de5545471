"""Command line entry point."""

from .main import app

__all__ = ["app"]
