"""API v1 routers package."""

from . import convert, health

__all__ = [
    "convert",
    "health",
]
