"""Glassdoor.com adapter.

Card structure:
    li[data-test="jobListing"]                          <- one card per job
      a[data-test="job-title"]                          <- job title
      span.EmployerProfile_compactEmployerName__9MGcV   <- company name
      button[data-test="save-job"]                      <- aria-label="Saved" when saved

New cards are appended when "Show more jobs" is clicked, so only additions
trigger a pass.
"""

from typing import Optional

from bs4.element import Tag

from jobfilter.domain.models import CardRecord, CardState
from jobfilter.store.keys import SiteKeys

from .base import BaseSiteAdapter


class GlassdoorAdapter(BaseSiteAdapter):
    """Adapter for glassdoor.com job listings."""

    name = "glassdoor"
    keys = SiteKeys.prefixed("glassdoor")
    card_selector = 'li[data-test="jobListing"]'
    container_selector = "ul.JobsList_jobsList__lqjTr"
    capabilities = frozenset({CardState.SAVED})
    save_control_selector = 'button[data-test="save-job"]'
    trigger_on_removals = False

    def read_card(self, element: Tag) -> Optional[CardRecord]:
        title_el = element.select_one('a[data-test="job-title"]')
        company_el = element.select_one("span.EmployerProfile_compactEmployerName__9MGcV")
        if title_el is None or company_el is None:
            return None

        return CardRecord(
            title=self._clean_text(title_el),
            company=self._clean_text(company_el),
            element=element,
            is_saved=self.is_saved(element),
        )

    def is_saved(self, card: Tag) -> bool:
        return self._attr(card.select_one(self.save_control_selector), "aria-label") == "Saved"
