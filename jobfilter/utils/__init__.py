"""Small shared helpers."""

from .timestamps import utc_now

__all__ = ["utc_now"]
