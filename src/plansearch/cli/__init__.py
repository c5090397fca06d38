"""Command-line interface for plansearch."""

from .main import app

__all__ = ["app"]
