"""String similarity scoring for fuzzy name matching.

The scoring constants below are empirical. They match the values the
assignee matcher has always used and are kept as module-level constants
so they can be tuned in one place.
"""

import re

EXACT_SCORE = 1.0
PREFIX_SCORE = 0.85
SUBSTRING_SCORE = 0.75
MIN_CONFIDENCE = 0.45

_SLUG_STRIP = re.compile(r"[\s._\-]+")


def slug(text: str) -> str:
    """Collapse a handle so "First.Last", "first_last" and "FirstLast" compare equal."""
    return _SLUG_STRIP.sub("", text).casefold()


def levenshtein(a: str, b: str) -> int:
    """Classic single-character insert/delete/substitute edit distance."""
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        current = [i]
        for j, cb in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,  # deletion
                    current[j - 1] + 1,  # insertion
                    previous[j - 1] + (ca != cb),  # substitution
                )
            )
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """Score two already-normalised strings in ``[0, 1]``.

    Exact match scores 1.0, a prefix relation 0.85, containment 0.75;
    anything else falls back to normalised edit distance.
    """
    if not a or not b:
        return 0.0
    if a == b:
        return EXACT_SCORE
    if a.startswith(b) or b.startswith(a):
        return PREFIX_SCORE
    if a in b or b in a:
        return SUBSTRING_SCORE
    distance = levenshtein(a, b)
    longest = max(len(a), len(b))
    return min(1.0, max(0.0, (longest - distance) / longest))
