"""Similarity helpers."""

from __future__ import annotations

from typing import Optional

from rapidfuzz import fuzz, utils

from ..core.cleaning import normalize_for_search


def levenshtein(a: str, b: str, max_distance: Optional[int] = None) -> int:
    """Edit distance between ``a`` and ``b``.

    The shared prefix and the (non-overlapping) shared suffix are stripped
    before the DP runs, so only the differing middle is computed.

    With ``max_distance`` set, returns ``max_distance + 1`` as soon as the
    result is known to exceed the cap (length gap too large, or a whole DP row
    above the cap).
    """
    if a == b:
        return 0

    start = 0
    limit = min(len(a), len(b))
    while start < limit and a[start] == b[start]:
        start += 1

    end = 0
    while (
        end < len(a) - start
        and end < len(b) - start
        and a[len(a) - 1 - end] == b[len(b) - 1 - end]
    ):
        end += 1

    a_mid = a[start:len(a) - end]
    b_mid = b[start:len(b) - end]
    m, n = len(a_mid), len(b_mid)

    if max_distance is not None and abs(m - n) > max_distance:
        return max_distance + 1

    if m == 0 or n == 0:
        return max(m, n)

    prev_row = list(range(n + 1))
    for i in range(1, m + 1):
        current_row = [i] + [0] * n
        row_min = i
        ca = a_mid[i - 1]
        for j in range(1, n + 1):
            cost = 0 if ca == b_mid[j - 1] else 1
            current_row[j] = min(
                prev_row[j] + 1,         # deletion
                current_row[j - 1] + 1,  # insertion
                prev_row[j - 1] + cost,  # substitution
            )
            if current_row[j] < row_min:
                row_min = current_row[j]

        if max_distance is not None and row_min > max_distance:
            return max_distance + 1

        prev_row = current_row

    distance = prev_row[n]
    if max_distance is not None and distance > max_distance:
        return max_distance + 1
    return distance


def string_similarity(a: Optional[str], b: Optional[str]) -> float:
    """``1 - distance / max(len(a), len(b))`` clamped to [0, 1].

    Two empty strings are identical (1.0); one empty string scores 0.0.
    """
    a = a or ""
    b = b or ""
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    max_len = max(len(a), len(b))
    score = 1.0 - levenshtein(a, b) / max_len
    return min(1.0, max(0.0, score))


def name_similarity(query: Optional[str], label: Optional[str]) -> float:
    """Similarity of two device labels after search normalization.

    Containment either way counts as a perfect name match.
    """
    q = normalize_for_search(query)
    d = normalize_for_search(label)
    if not q or not d:
        return 0.0
    if q in d or d in q:
        return 1.0
    return string_similarity(q, d)


def fuzzy_score(query: str, candidate: str) -> float:
    """Order-tolerant similarity score (0~100) from rapidfuzz WRatio."""
    if not query or not candidate:
        return 0.0
    return float(fuzz.WRatio(query, candidate, processor=utils.default_process))
