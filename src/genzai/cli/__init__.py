"""Command line interface for GenzAI."""

from .app import app, main

__all__ = ["app", "main"]
