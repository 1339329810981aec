"""Namespaced storage keys for one site's filter settings."""

from dataclasses import dataclass, fields
from typing import Dict, Iterable, List, Optional

LIST_FIELDS = ("whitelist_keywords", "blacklist_keywords", "blacklisted_companies")
FLAG_FIELDS = ("hide_saved", "hide_promoted", "hide_dismissed", "hide_applied")


@dataclass(frozen=True)
class SiteKeys:
    """Maps RuleSet fields to the storage keys a site uses.

    A field left as None is not configurable for the site and always loads
    as its default (empty list / False).
    """

    whitelist_keywords: Optional[str] = None
    blacklist_keywords: Optional[str] = None
    blacklisted_companies: Optional[str] = None
    hide_saved: Optional[str] = None
    hide_promoted: Optional[str] = None
    hide_dismissed: Optional[str] = None
    hide_applied: Optional[str] = None

    @classmethod
    def prefixed(cls, prefix: str, toggles: Iterable[str] = ("hide_saved",)) -> "SiteKeys":
        """Keys in the ``<prefix>_<camelCaseName>`` scheme.

        Example:
            >>> SiteKeys.prefixed("indeed").blacklist_keywords
            'indeed_blacklistedKeywords'
        """
        names = {
            "whitelist_keywords": "whitelistKeywords",
            "blacklist_keywords": "blacklistedKeywords",
            "blacklisted_companies": "blacklistedCompanies",
            "hide_saved": "hideSaved",
            "hide_promoted": "hidePromoted",
            "hide_dismissed": "hideDismissed",
            "hide_applied": "hideApplied",
        }
        enabled = set(LIST_FIELDS) | set(toggles)
        return cls(**{
            field_name: f"{prefix}_{key}"
            for field_name, key in names.items()
            if field_name in enabled
        })

    def field_map(self) -> Dict[str, str]:
        """RuleSet field name -> storage key, for configured fields only."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def all_keys(self) -> List[str]:
        return list(self.field_map().values())

    def is_relevant(self, changed_keys: Iterable[str]) -> bool:
        """Whether a change set touches any of this site's keys."""
        own = set(self.all_keys())
        return any(key in own for key in changed_keys)
