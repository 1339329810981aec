"""Base class for site adapters (card readers).

A site adapter knows where a recruiting site puts its job cards and how to
read one: the title, the company and whichever state flags the site shows.
Everything else (matching, precedence, visibility) is shared.
"""

from abc import ABC, abstractmethod
from typing import FrozenSet, List, Optional

from bs4.element import Tag

from jobfilter.domain.models import CardRecord, CardState
from jobfilter.normalization import NormalizationMode
from jobfilter.store.keys import SiteKeys


class BaseSiteAdapter(ABC):
    """Base class for all site adapters.

    Subclasses set the class attributes below and implement read_card().

    Attributes:
        name: Site identifier used in configuration ("naukri", "indeed", ...)
        keys: Storage keys of the site's settings
        card_selector: CSS selector matching every job card
        container_selector: Smallest stable ancestor of the card list
        capabilities: Card states the site exposes
        normalization_mode: How titles and keywords are normalized
        save_control_selector: Save toggle inside a card, if the site has one
        url_fragment: Filtering only runs on URLs containing this (None = any)
        trigger_on_removals: Whether node removals alone re-trigger a pass
    """

    name: str = ""
    keys: SiteKeys = SiteKeys()
    card_selector: str = ""
    container_selector: Optional[str] = None
    capabilities: FrozenSet[CardState] = frozenset()
    normalization_mode: NormalizationMode = NormalizationMode.ALPHA
    save_control_selector: Optional[str] = None
    url_fragment: Optional[str] = None
    trigger_on_removals: bool = True

    def find_cards(self, root: Tag) -> List[Tag]:
        """Return every card element currently under ``root``."""
        return root.select(self.card_selector)

    @abstractmethod
    def read_card(self, element: Tag) -> Optional[CardRecord]:
        """Read a card element.

        Returns:
            CardRecord, or None when the element is not a job card (ad slot,
            nudge card, ghost duplicate) or lacks a required field
        """
        pass

    def card_for(self, element: Tag) -> Optional[Tag]:
        """Card element enclosing ``element`` (or ``element`` itself)."""
        return element.css.closest(self.card_selector)

    def save_control_for(self, element: Tag) -> Optional[Tag]:
        """Save control enclosing a click target, if the site has one."""
        if not self.save_control_selector:
            return None
        return element.css.closest(self.save_control_selector)

    def is_saved(self, card: Tag) -> bool:
        """Current saved state of a card, re-read from the page."""
        record = self.read_card(card)
        return bool(record and record.is_saved)

    def matches_url(self, url: str) -> bool:
        """Whether filtering applies to a page at ``url``."""
        if not self.url_fragment:
            return True
        return self.url_fragment in (url or "")

    def supports(self, state: CardState) -> bool:
        return state in self.capabilities

    @staticmethod
    def _clean_text(element: Optional[Tag]) -> str:
        """Visible text of an element, whitespace collapsed and trimmed."""
        if element is None:
            return ""
        return " ".join(element.get_text().split())

    @staticmethod
    def _attr(element: Optional[Tag], name: str) -> Optional[str]:
        """Attribute value as a string (multi-valued attributes joined)."""
        if element is None:
            return None
        value = element.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    @staticmethod
    def _has_class(element: Optional[Tag], class_name: str) -> bool:
        if element is None:
            return False
        return class_name in (element.get("class") or [])

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
