"""Indeed.com adapter.

Card structure:
    li.css-1ac2h1w                            <- one card per list item
      .cardOutline[aria-hidden="true"]        <- ghost duplicate of the selected job, skipped
      a.jcs-JobTitle span[title]              <- job title
      span[data-testid="company-name"]        <- company name
      button.bookmark[aria-pressed="true"]    <- saved
"""

from typing import Optional

from bs4.element import Tag

from jobfilter.domain.models import CardRecord, CardState
from jobfilter.store.keys import SiteKeys

from .base import BaseSiteAdapter


class IndeedAdapter(BaseSiteAdapter):
    """Adapter for indeed.com search results."""

    name = "indeed"
    keys = SiteKeys.prefixed("indeed")
    card_selector = "li.css-1ac2h1w"
    container_selector = "ul.css-pygyny"
    capabilities = frozenset({CardState.SAVED})
    save_control_selector = "button.bookmark"

    def read_card(self, element: Tag) -> Optional[CardRecord]:
        outline = element.select_one(".cardOutline")
        if self._attr(outline, "aria-hidden") == "true":
            return None

        title_el = element.select_one("a.jcs-JobTitle span[title]")
        company_el = element.select_one('span[data-testid="company-name"]')
        if title_el is None or company_el is None:
            return None

        return CardRecord(
            title=(self._attr(title_el, "title") or self._clean_text(title_el)).strip(),
            company=self._clean_text(company_el),
            element=element,
            is_saved=self.is_saved(element),
        )

    def is_saved(self, card: Tag) -> bool:
        return self._attr(card.select_one("button.bookmark"), "aria-pressed") == "true"
