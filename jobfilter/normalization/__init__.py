"""Text normalization shared by every site integration.

This module provides:
- normalize: canonical matching form of a string (alnum or alpha-only mode)
- NormalizationMode: which characters survive normalization
- MatchableTitle: precomputed title variants for keyword matching
"""

from .models import MatchableTitle
from .service import NormalizationMode, compress, normalize, split_words

__all__ = [
    "normalize",
    "compress",
    "split_words",
    "NormalizationMode",
    "MatchableTitle",
]
