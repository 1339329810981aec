"""Exceptions raised by the page model."""


class PageError(Exception):
    """Invalid page operation (unreadable file, observing a missing element)."""

    pass
