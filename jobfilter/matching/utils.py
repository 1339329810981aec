"""Regex helpers for adapters that match companies with one combined pattern."""

import re
from typing import Iterable, Pattern

# Characters with special meaning in a regular expression
_METACHARACTERS = re.compile(r"[.*+?^${}()|\[\]\\]")

# Pattern that can never match anything
NEVER_MATCHES: Pattern[str] = re.compile(r"(?!)")


def escape_regex(text: str) -> str:
    """Escape every regex metacharacter so ``text`` matches literally.

    Example:
        >>> escape_regex("A.C.M.E (Labs)+")
        'A\\\\.C\\\\.M\\\\.E \\\\(Labs\\\\)\\\\+'
    """
    return _METACHARACTERS.sub(lambda m: "\\" + m.group(0), text)


def build_company_pattern(companies: Iterable[str]) -> Pattern[str]:
    """Build one anchored, case-insensitive alternation over company names.

    The pattern is meant for ``fullmatch`` against the trimmed company text,
    so it accepts exactly the strings ``matches_company`` accepts.
    An empty list yields a pattern that never matches.

    Args:
        companies: User-supplied company names (trimmed, blanks skipped)

    Returns:
        Compiled pattern
    """
    escaped = [escape_regex(name.strip()) for name in companies if name and name.strip()]
    if not escaped:
        return NEVER_MATCHES
    return re.compile(f"(?:{'|'.join(escaped)})", re.IGNORECASE)
