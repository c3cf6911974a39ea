"""Command line interface for filetree."""

from .main import app

__all__ = ["app"]
