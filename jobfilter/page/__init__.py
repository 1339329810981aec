"""Page model: parsed HTML, mutation observers, events and the visibility toggle."""

from .document import (
    ATTRIBUTES,
    CHILD_LIST,
    CLICK,
    NAVIGATE,
    MutationObserver,
    MutationRecord,
    Page,
    PageEvent,
    contains,
)
from .exceptions import PageError
from .visibility import display_value, hide, is_hidden, set_visible, show

__all__ = [
    "Page",
    "PageEvent",
    "MutationObserver",
    "MutationRecord",
    "PageError",
    "contains",
    "CHILD_LIST",
    "ATTRIBUTES",
    "CLICK",
    "NAVIGATE",
    "hide",
    "show",
    "set_visible",
    "is_hidden",
    "display_value",
]
