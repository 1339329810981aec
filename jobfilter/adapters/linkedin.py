"""LinkedIn job search adapter.

Card structure:
    li.scaffold-layout__list-item                       <- one card per job
      .job-card-list__title--link                       <- job title
      .artdeco-entity-lockup__subtitle span             <- company name
      .job-card-container__footer-job-state             <- "Applied"
      .job-card-container__footer-item                  <- "Promoted"
      .job-card-container__footer-item--highlighted     <- dismissed notice
"""

from typing import Optional

from bs4.element import Tag

from jobfilter.domain.models import CardRecord, CardState
from jobfilter.normalization import NormalizationMode
from jobfilter.store.keys import SiteKeys

from .base import BaseSiteAdapter

DISMISSED_MARKERS = ("won’t show you this job again", "won't show you this job again")


class LinkedInAdapter(BaseSiteAdapter):
    """Adapter for linkedin.com/jobs/search.

    LinkedIn settings predate per-site prefixes, so its keys are unprefixed.
    Titles keep digits when normalized.
    """

    name = "linkedin"
    keys = SiteKeys(
        whitelist_keywords="whitelistKeywords",
        blacklist_keywords="titleKeywords",
        blacklisted_companies="companyNames",
        hide_applied="hideApplied",
        hide_promoted="hidePromoted",
        hide_dismissed="hideDismissed",
    )
    card_selector = ".scaffold-layout__list-item"
    container_selector = ".scaffold-layout__list"
    capabilities = frozenset({CardState.APPLIED, CardState.PROMOTED, CardState.DISMISSED})
    normalization_mode = NormalizationMode.ALNUM
    url_fragment = "/jobs/search/"

    def read_card(self, element: Tag) -> Optional[CardRecord]:
        title_el = element.select_one(".job-card-list__title--link")
        company_el = element.select_one(".artdeco-entity-lockup__subtitle span")
        if title_el is None or company_el is None:
            return None

        state_el = element.select_one(".job-card-container__footer-job-state")
        highlighted_el = element.select_one(".job-card-container__footer-item--highlighted")
        highlighted = self._clean_text(highlighted_el).lower()

        return CardRecord(
            title=self._clean_text(title_el),
            company=self._clean_text(company_el),
            element=element,
            is_applied="Applied" in self._clean_text(state_el),
            is_promoted=any(
                "Promoted" in self._clean_text(item)
                for item in element.select(".job-card-container__footer-item")
            ),
            is_dismissed=any(marker in highlighted for marker in DISMISSED_MARKERS),
        )
