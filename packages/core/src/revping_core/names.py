"""Fuzzy comparison of display names."""

from __future__ import annotations


def name_distance(a: str, b: str) -> int:
    """Levenshtein distance between two names, ignoring case.

    Names are person-name length, so the plain O(len(a) * len(b)) table is
    fine. Only two rows are kept at a time.
    """
    s, t = a.upper(), b.upper()
    if not s:
        return len(t)
    if not t:
        return len(s)

    previous = list(range(len(t) + 1))
    for i, sc in enumerate(s, 1):
        current = [i]
        for j, tc in enumerate(t, 1):
            if sc == tc:
                current.append(previous[j - 1])
            else:
                current.append(1 + min(previous[j], current[j - 1], previous[j - 1]))
        previous = current
    return previous[-1]
