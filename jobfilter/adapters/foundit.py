"""Foundit.in adapter.

Card structure:
    .jobCardWrapper                         <- one card per job
      h2.jobCardTitle a[aria-label]         <- job title
      span.jobCardCompany a                 <- company name
      button.jobCardSaveUnsaveBtn           <- has class "save-job-icon" when saved
"""

from typing import Optional

from bs4.element import Tag

from jobfilter.domain.models import CardRecord, CardState
from jobfilter.store.keys import SiteKeys

from .base import BaseSiteAdapter


class FounditAdapter(BaseSiteAdapter):
    """Adapter for foundit.in search results (an SPA; pages swap in place)."""

    name = "foundit"
    keys = SiteKeys.prefixed("foundit")
    card_selector = ".jobCardWrapper"
    container_selector = "#middleSection"
    capabilities = frozenset({CardState.SAVED})
    save_control_selector = "button.jobCardSaveUnsaveBtn"
    trigger_on_removals = False

    def read_card(self, element: Tag) -> Optional[CardRecord]:
        title_el = element.select_one("h2.jobCardTitle a")
        company_el = element.select_one("span.jobCardCompany a")
        if title_el is None or company_el is None:
            return None

        return CardRecord(
            title=(self._attr(title_el, "aria-label") or self._clean_text(title_el)).strip(),
            company=self._clean_text(company_el),
            element=element,
            is_saved=self.is_saved(element),
        )

    def is_saved(self, card: Tag) -> bool:
        return self._has_class(card.select_one(self.save_control_selector), "save-job-icon")
