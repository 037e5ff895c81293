"""String and structure similarity scores used by rename detection.

All scores are in [0, 1]; 1 means identical.
"""

from __future__ import annotations

import re
from collections.abc import Collection

_WHITESPACE_RE = re.compile(r"\s+")


def normalize_signature(sig: str) -> str:
    """Collapse whitespace runs and trim."""
    return _WHITESPACE_RE.sub(" ", sig).strip()


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance (insert / delete / substitute, unit cost)."""
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            if ca == cb:
                current.append(previous[j - 1])
            else:
                current.append(1 + min(previous[j], current[j - 1], previous[j - 1]))
        previous = current
    return previous[-1]


def name_similarity(a: str, b: str) -> float:
    """Similarity of two identifiers.

    Case-only differences score 0.95 and abbreviation expansions (one name a
    prefix of the other, case-insensitive) score 0.85; everything else is
    normalized edit distance over the lowercased names.
    """
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    a_lower = a.lower()
    b_lower = b.lower()
    if a_lower == b_lower:
        return 0.95
    if a_lower.startswith(b_lower) or b_lower.startswith(a_lower):
        return 0.85

    distance = edit_distance(a_lower, b_lower)
    return 1 - distance / max(len(a_lower), len(b_lower))


def signature_similarity(sig1: str, sig2: str) -> float:
    """Exact match 1.0, whitespace-normalized match 0.95, else edit-distance ratio."""
    if sig1 == sig2:
        return 1.0

    norm1 = normalize_signature(sig1)
    norm2 = normalize_signature(sig2)
    if norm1 == norm2:
        return 0.95

    return 1 - edit_distance(norm1, norm2) / max(len(norm1), len(norm2))


def modifier_similarity(mods1: Collection[str], mods2: Collection[str]) -> float:
    """Jaccard similarity of two modifier sets (two empty sets are identical)."""
    set1 = set(mods1)
    set2 = set(mods2)
    if not set1 and not set2:
        return 1.0
    return len(set1 & set2) / len(set1 | set2)


def children_similarity(count1: int, count2: int) -> float:
    if count1 == count2:
        return 1.0
    if count1 == 0 or count2 == 0:
        return 0.0
    return min(count1, count2) / max(count1, count2)
