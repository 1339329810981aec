"""Filter session lifecycle."""

from .service import FilterSession

__all__ = ["FilterSession"]
