"""Text normalization for keyword and title matching.

Every string that takes part in a keyword comparison goes through
``normalize`` first, so rules and titles always meet in the same canonical
form: lower-case, runs of unsupported characters replaced by one space,
trimmed.
"""

import re
from enum import Enum
from typing import List, Optional


class NormalizationMode(str, Enum):
    """Which characters survive normalization.

    ALNUM keeps letters and digits (LinkedIn integration); ALPHA keeps only
    letters, so "3D Artist" and "Artist" compare equal on the word level.
    """

    ALNUM = "alnum"
    ALPHA = "alpha"


_DISALLOWED = {
    NormalizationMode.ALNUM: re.compile(r"[^a-z0-9]+"),
    NormalizationMode.ALPHA: re.compile(r"[^a-z]+"),
}

_WHITESPACE = re.compile(r"\s+")


def normalize(text: Optional[str], mode: NormalizationMode = NormalizationMode.ALPHA) -> str:
    """Convert raw text into its canonical matching form.

    Pure and idempotent: the output only contains characters the mode keeps
    plus single spaces, so normalizing it again returns it unchanged.

    Args:
        text: Raw text (None and "" yield "")
        mode: NormalizationMode deciding whether digits are kept

    Returns:
        Normalized text

    Example:
        >>> normalize("Sr. Backend-Engineer (Python 3)")
        'sr backend engineer python'
        >>> normalize("Sr. Backend-Engineer (Python 3)", NormalizationMode.ALNUM)
        'sr backend engineer python 3'
    """
    if not text:
        return ""

    pattern = _DISALLOWED[NormalizationMode(mode)]
    return pattern.sub(" ", text.lower()).strip()


def compress(text: str) -> str:
    """Remove all whitespace ("backend engineer" -> "backendengineer")."""
    return _WHITESPACE.sub("", text)


def split_words(normalized_text: str) -> List[str]:
    """Split normalized text into words; empty text has no words."""
    if not normalized_text:
        return []
    return normalized_text.split(" ")
