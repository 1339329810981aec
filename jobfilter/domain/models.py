"""Core domain models for rules, cards and filter decisions.

This module defines the data structures used throughout the application:
- RuleSet: immutable snapshot of a site's filter settings
- CardRecord: what a site adapter read from one job card during a pass
- CardState / HideReason: state flags and the rule that hid a card
- FilterDecision: outcome of evaluating one card
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class CardState(str, Enum):
    """Card state flags a site may expose."""

    SAVED = "saved"
    PROMOTED = "promoted"
    DISMISSED = "dismissed"
    APPLIED = "applied"


class HideReason(str, Enum):
    """Rule that decided to hide a card."""

    COMPANY = "company"
    WHITELIST = "whitelist"
    BLACKLIST = "blacklist"
    SAVED = "saved"
    PROMOTED = "promoted"
    DISMISSED = "dismissed"
    APPLIED = "applied"


class RuleSet(BaseModel):
    """Filter settings for one site, loaded from the rule store.

    A RuleSet is frozen: a settings change produces a new instance that
    replaces the old one in a single assignment, so a filter pass always sees
    one complete snapshot.

    Rule strings are trimmed and blank entries are dropped on construction.
    """

    model_config = ConfigDict(frozen=True)

    whitelist_keywords: Tuple[str, ...] = Field(
        default=(), description="Title must match at least one (ignored when empty)"
    )
    blacklist_keywords: Tuple[str, ...] = Field(
        default=(), description="Any title match hides the card"
    )
    blacklisted_companies: Tuple[str, ...] = Field(
        default=(), description="Exact, case-insensitive company names to hide"
    )
    hide_saved: bool = False
    hide_promoted: bool = False
    hide_dismissed: bool = False
    hide_applied: bool = False

    @field_validator(
        "whitelist_keywords", "blacklist_keywords", "blacklisted_companies", mode="before"
    )
    @classmethod
    def strip_rules(cls, v: Any) -> Tuple[str, ...]:
        """Trim rule strings and discard empty or whitespace-only entries."""
        if v is None:
            return ()
        rules = []
        for item in v:
            if not isinstance(item, str):
                continue
            stripped = item.strip()
            if stripped:
                rules.append(stripped)
        return tuple(rules)

    @classmethod
    def empty(cls) -> "RuleSet":
        """RuleSet that hides nothing (used when settings cannot be loaded)."""
        return cls()

    @property
    def has_whitelist(self) -> bool:
        return bool(self.whitelist_keywords)

    def hides_state(self, state: CardState) -> bool:
        """Whether the toggle for ``state`` is switched on."""
        return {
            CardState.SAVED: self.hide_saved,
            CardState.PROMOTED: self.hide_promoted,
            CardState.DISMISSED: self.hide_dismissed,
            CardState.APPLIED: self.hide_applied,
        }[state]


@dataclass
class CardRecord:
    """Fields read from one job card. Lives for a single filter pass.

    Attributes:
        title: Visible job title
        company: Visible company name ("" when the site allows it to be absent)
        element: Page element whose visibility is toggled for this card
        is_saved / is_promoted / is_applied / is_dismissed: state flags
    """

    title: str
    company: str
    element: Any = None
    is_saved: bool = False
    is_promoted: bool = False
    is_applied: bool = False
    is_dismissed: bool = False

    def has_state(self, state: CardState) -> bool:
        return {
            CardState.SAVED: self.is_saved,
            CardState.PROMOTED: self.is_promoted,
            CardState.DISMISSED: self.is_dismissed,
            CardState.APPLIED: self.is_applied,
        }[state]


@dataclass(frozen=True)
class FilterDecision:
    """Outcome of evaluating one card against a RuleSet.

    Attributes:
        hide: Whether the card should be hidden
        reason: Rule that decided to hide it (None when shown)
        matched_rule: Keyword or company string that fired, when applicable
    """

    hide: bool
    reason: Optional[HideReason] = None
    matched_rule: Optional[str] = None

    @classmethod
    def show(cls) -> "FilterDecision":
        return cls(hide=False)

    @classmethod
    def hidden(cls, reason: HideReason, matched_rule: Optional[str] = None) -> "FilterDecision":
        return cls(hide=True, reason=reason, matched_rule=matched_rule)
