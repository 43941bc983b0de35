"""Utilitaires du moteur de pricing."""

from .timezone_handler import TimezoneHandler

__all__ = [
    "TimezoneHandler",
]
