"""Keyword and company matching for job cards.

This module provides:
- matches_whitelist / matches_blacklist / matches_company: single-rule checks
- RuleMatcher: applies a RuleSet's company, whitelist and blacklist rules
- escape_regex / build_company_pattern: literal company alternation patterns
"""

from .engine import RuleMatcher, matches_blacklist, matches_company, matches_whitelist
from .utils import build_company_pattern, escape_regex

__all__ = [
    "RuleMatcher",
    "matches_whitelist",
    "matches_blacklist",
    "matches_company",
    "escape_regex",
    "build_company_pattern",
]
