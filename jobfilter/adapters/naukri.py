"""Naukri.com adapter.

Regular cards:
    .srp-jobtuple-wrapper
      a.title                                  <- job title
      a.comp-name                              <- company (may be absent)
      .ni-job-tuple-icon-srpSaveFilled         <- present when saved

Promoted / ad cards live inside <section> widgets:
    .cust-job-tuple.srp-tuple.checkbox
      a.title or a.srp-title                   <- job title
      span.srp-company                         <- company
The whole enclosing <section> is hidden so the slot disappears cleanly.
"""

from typing import Optional

from bs4.element import Tag

from jobfilter.domain.models import CardRecord, CardState
from jobfilter.store.keys import SiteKeys

from .base import BaseSiteAdapter

REGULAR_CARD = ".srp-jobtuple-wrapper"
PROMOTED_CARD = ".cust-job-tuple.srp-tuple.checkbox"
SAVED_ICON = ".ni-job-tuple-icon-srpSaveFilled"


class NaukriAdapter(BaseSiteAdapter):
    """Adapter for naukri.com search results."""

    name = "naukri"
    keys = SiteKeys.prefixed("naukri", toggles=("hide_saved", "hide_promoted"))
    card_selector = f"{REGULAR_CARD}, {PROMOTED_CARD}"
    container_selector = '[class*="styles_job-listing-container"]'
    capabilities = frozenset({CardState.SAVED, CardState.PROMOTED})
    save_control_selector = (
        ".ni-job-tuple-icon-srpSaveUnfilled, .ni-job-tuple-icon-srpSaveFilled, .save-job-tag"
    )

    def read_card(self, element: Tag) -> Optional[CardRecord]:
        if element.css.match(PROMOTED_CARD):
            return self._read_promoted(element)
        return self._read_regular(element)

    def _read_regular(self, element: Tag) -> Optional[CardRecord]:
        title_el = element.select_one("a.title")
        if title_el is None:
            return None

        return CardRecord(
            title=self._clean_text(title_el),
            company=self._clean_text(element.select_one("a.comp-name")),
            element=element,
            is_saved=element.select_one(SAVED_ICON) is not None,
        )

    def _read_promoted(self, element: Tag) -> Optional[CardRecord]:
        title_el = element.select_one("a.title, a.srp-title")
        if title_el is None:
            return None

        section = element.find_parent("section")
        return CardRecord(
            title=self._clean_text(title_el),
            company=self._clean_text(element.select_one("span.srp-company")),
            element=section if section is not None else element,
            is_promoted=True,
        )

    def card_for(self, element: Tag) -> Optional[Tag]:
        # Only regular cards carry a save control
        return element.css.closest(REGULAR_CARD)

    def is_saved(self, card: Tag) -> bool:
        return card.select_one(SAVED_ICON) is not None
