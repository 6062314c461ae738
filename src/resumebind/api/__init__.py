"""HTTP API for resumebind."""

from .app import create_app

__all__ = ["create_app"]
