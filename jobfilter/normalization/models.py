"""Data models for the normalization layer."""

from dataclasses import dataclass
from typing import FrozenSet

from .service import NormalizationMode, compress, normalize, split_words


@dataclass(frozen=True)
class MatchableTitle:
    """Original and normalized variants of a card title.

    Built once per card per pass so every keyword is compared against the
    same precomputed word set and compressed form.

    Attributes:
        original: Title text as read from the card
        normalized: Output of normalize() for the site's mode
        words: Set of words in the normalized title
        compressed: Normalized title with all whitespace removed
        mode: NormalizationMode used to build this title
    """

    original: str
    normalized: str
    words: FrozenSet[str]
    compressed: str
    mode: NormalizationMode = NormalizationMode.ALPHA

    @classmethod
    def from_text(
        cls, title: str, mode: NormalizationMode = NormalizationMode.ALPHA
    ) -> "MatchableTitle":
        normalized = normalize(title, mode)
        return cls(
            original=title,
            normalized=normalized,
            words=frozenset(split_words(normalized)),
            compressed=compress(normalized),
            mode=mode,
        )
