"""
Medication name similarity.

Normalized Levenshtein similarity: 1 - distance / max(len(a), len(b)).
Two empty strings are identical (1.0); an empty and a non-empty string
share nothing (0.0).
"""

from __future__ import annotations

from rapidfuzz.distance import Levenshtein

DUPLICATE_THRESHOLD = 0.8


def similarity(a: str, b: str) -> float:
    """Edit-distance similarity in [0, 1]. Case-sensitive and symmetric."""
    if not a or not b:
        return 1.0 if a == b else 0.0
    return Levenshtein.normalized_similarity(a, b)


def is_probable_duplicate(a: str, b: str, threshold: float = DUPLICATE_THRESHOLD) -> bool:
    """Check whether two medication names likely refer to the same drug.

    Names are compared case-insensitively.
    """
    return similarity(a.lower(), b.lower()) >= threshold
