"""HTTP surface for askdad."""

from .app import create_app

__all__ = ["create_app"]
