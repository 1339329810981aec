"""Decide whether one card is hidden."""

from typing import FrozenSet, Iterable, Optional

from jobfilter.domain.models import CardRecord, CardState, FilterDecision, HideReason, RuleSet
from jobfilter.matching import RuleMatcher
from jobfilter.normalization import NormalizationMode

# Order in which state toggles are checked
STATE_ORDER = (CardState.SAVED, CardState.PROMOTED, CardState.DISMISSED, CardState.APPLIED)


def evaluate_card(
    card: CardRecord,
    rules: RuleSet,
    mode: NormalizationMode = NormalizationMode.ALPHA,
    capabilities: Iterable[CardState] = STATE_ORDER,
    matcher: Optional[RuleMatcher] = None,
) -> FilterDecision:
    """
    Evaluate a card against a RuleSet. The first rule that hides wins.

    Precedence:
    1. company blacklist
    2. whitelist, when non-empty and no keyword matches
    3. blacklist keyword
    4. state toggles for states the site supports: saved, promoted,
       dismissed, applied

    Args:
        card: Card read by a site adapter
        rules: Current RuleSet snapshot
        mode: Normalization mode of the site
        capabilities: States the site exposes; other toggles are ignored
        matcher: RuleMatcher built for ``rules`` (reused across a pass)

    Returns:
        FilterDecision with the reason and matched rule when hidden

    Example:
        >>> rules = RuleSet(whitelist_keywords=["engineer"], blacklist_keywords=["intern"])
        >>> evaluate_card(CardRecord("Software Engineer Intern", "Acme"), rules).reason
        <HideReason.BLACKLIST: 'blacklist'>
    """
    if matcher is None:
        matcher = RuleMatcher(rules, mode)

    decision = matcher.evaluate(card.title, card.company)
    if decision.hide:
        return decision

    supported: FrozenSet[CardState] = frozenset(capabilities)
    for state in STATE_ORDER:
        if state in supported and rules.hides_state(state) and card.has_state(state):
            return FilterDecision.hidden(HideReason(state.value))

    return FilterDecision.show()
