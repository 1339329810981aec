"""Keyword and company matching against normalized job titles.

Whitelist keywords match loosely (every keyword word appears somewhere in the
title), blacklist keywords match as exact phrases on word boundaries, and
company names match exactly. Multi-word keywords of either list also match
their compressed form ("backend engineer" in "backendengineer") so titles
with glued words are still caught.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Iterable, Optional, Pattern, Tuple, Union

from jobfilter.domain.models import FilterDecision, HideReason, RuleSet
from jobfilter.normalization import MatchableTitle, NormalizationMode, compress, normalize, split_words


TitleLike = Union[str, MatchableTitle]


@dataclass(frozen=True)
class _Keyword:
    normalized: str
    words: Tuple[str, ...]
    compressed: str
    phrase: Optional[Pattern[str]]

    @property
    def is_multi_word(self) -> bool:
        return len(self.words) > 1


@lru_cache(maxsize=1024)
def _parse_keyword(keyword: str, mode: NormalizationMode) -> _Keyword:
    normalized = normalize(keyword, mode)
    words = tuple(split_words(normalized))
    phrase = None
    if len(words) > 1:
        phrase = re.compile(r"\b" + r"\s+".join(re.escape(w) for w in words) + r"\b")
    return _Keyword(normalized, words, compress(normalized), phrase)


def _as_title(title: TitleLike, mode: NormalizationMode) -> MatchableTitle:
    if isinstance(title, MatchableTitle):
        return title
    return MatchableTitle.from_text(title, mode)


def _compressed_match(kw: _Keyword, title: MatchableTitle) -> bool:
    return kw.is_multi_word and kw.compressed in title.compressed


def matches_whitelist(
    keyword: str, normalized_title: TitleLike, mode: NormalizationMode = NormalizationMode.ALPHA
) -> bool:
    """Loose whitelist match.

    True when every word of the normalized keyword is in the title's word set
    (any order), or, for multi-word keywords, when the compressed title
    contains the compressed keyword. A keyword with no words never matches.

    Example:
        >>> matches_whitelist("senior engineer", normalize("Senior Backend Engineer"))
        True
    """
    kw = _parse_keyword(keyword, NormalizationMode(mode))
    if not kw.words:
        return False
    title = _as_title(normalized_title, mode)
    if all(word in title.words for word in kw.words):
        return True
    return _compressed_match(kw, title)


def matches_blacklist(
    keyword: str, normalized_title: TitleLike, mode: NormalizationMode = NormalizationMode.ALPHA
) -> bool:
    """Exact-phrase blacklist match.

    Single-word keywords match whole words only ("ai" never matches "air").
    Multi-word keywords match the word sequence on word boundaries, or the
    compressed form.

    Example:
        >>> matches_blacklist("machine learning", normalize("Sr Machine Learning Engineer"))
        True
        >>> matches_blacklist("machine learning", normalize("Learning Machine Operator"))
        False
    """
    kw = _parse_keyword(keyword, NormalizationMode(mode))
    if not kw.words:
        return False
    title = _as_title(normalized_title, mode)
    if not kw.is_multi_word:
        return kw.words[0] in title.words
    if kw.phrase.search(title.normalized):
        return True
    return _compressed_match(kw, title)


def matches_company(company_text: str, company_list: Iterable[str]) -> bool:
    """Exact, case-insensitive, whole-string company match after trimming.

    "Acme" matches "acme" but "Acme Corp" does not match "acme".
    """
    company = (company_text or "").strip().lower()
    if not company:
        return False
    return any(company == name.strip().lower() for name in company_list if name)


class RuleMatcher:
    """Evaluates a card's title and company against one RuleSet.

    Built once per filter pass; keyword parsing is cached, company names are
    indexed for exact lookups.

    Precedence, first hit wins:
    1. company blacklist
    2. whitelist (only when non-empty): no keyword matched
    3. blacklist keyword
    """

    def __init__(
        self,
        rules: RuleSet,
        mode: NormalizationMode = NormalizationMode.ALPHA,
    ):
        self.rules = rules
        self.mode = NormalizationMode(mode)
        self._companies: Dict[str, str] = {}
        for name in rules.blacklisted_companies:
            self._companies.setdefault(name.strip().lower(), name)

    def company_rule(self, company: str) -> Optional[str]:
        """Return the blacklisted company name matching ``company``, if any."""
        key = (company or "").strip().lower()
        if not key:
            return None
        return self._companies.get(key)

    def whitelist_rule(self, title: TitleLike) -> Optional[str]:
        """Return the first whitelist keyword matching the title, if any."""
        matchable = _as_title(title, self.mode)
        for keyword in self.rules.whitelist_keywords:
            if matches_whitelist(keyword, matchable, self.mode):
                return keyword
        return None

    def blacklist_rule(self, title: TitleLike) -> Optional[str]:
        """Return the first blacklist keyword matching the title, if any."""
        matchable = _as_title(title, self.mode)
        for keyword in self.rules.blacklist_keywords:
            if matches_blacklist(keyword, matchable, self.mode):
                return keyword
        return None

    def evaluate(self, title: TitleLike, company: str) -> FilterDecision:
        """Apply company, whitelist and blacklist rules in order.

        Args:
            title: Raw or pre-built MatchableTitle
            company: Company text as read from the card

        Returns:
            FilterDecision (state toggles are not considered here)
        """
        matchable = _as_title(title, self.mode)

        company_hit = self.company_rule(company)
        if company_hit is not None:
            return FilterDecision.hidden(HideReason.COMPANY, company_hit)

        if self.rules.has_whitelist and self.whitelist_rule(matchable) is None:
            return FilterDecision.hidden(HideReason.WHITELIST)

        keyword_hit = self.blacklist_rule(matchable)
        if keyword_hit is not None:
            return FilterDecision.hidden(HideReason.BLACKLIST, keyword_hit)

        return FilterDecision.show()
