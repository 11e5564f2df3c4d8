"""Fuzzy matching for typo-tolerant product search.

Edit distance is the only fuzziness the engine supports: "vestdo" still
finds "vestido" because one insertion turns one into the other.
"""

from __future__ import annotations


DEFAULT_SIMILARITY_THRESHOLD = 2


def levenshtein_distance(s1: str, s2: str, max_distance: int | None = None) -> int:
    """Calculate the Levenshtein (edit) distance between two strings.

    Classic dynamic programming over two rows, with optional early
    termination when the distance is guaranteed to exceed max_distance.

    Args:
        s1: First string.
        s2: Second string.
        max_distance: If provided, return max_distance+1 as soon as the
            distance is known to exceed this bound.

    Returns:
        The minimum number of single-character insertions, deletions and
        substitutions needed to change s1 into s2. If max_distance is set
        and exceeded, returns max_distance+1.

    Examples:
        >>> levenshtein_distance("vestido", "vestdo")
        1
        >>> levenshtein_distance("kitten", "sitting")
        3
        >>> levenshtein_distance("", "abc")
        3
    """
    if not s1:
        return len(s2)
    if not s2:
        return len(s1)

    # Shorter string as columns
    if len(s1) > len(s2):
        s1, s2 = s2, s1

    m, n = len(s1), len(s2)

    if max_distance is not None and n - m > max_distance:
        return max_distance + 1

    prev_row = list(range(m + 1))
    curr_row = [0] * (m + 1)

    for j in range(1, n + 1):
        curr_row[0] = j
        row_min = j
        for i in range(1, m + 1):
            cost = 0 if s1[i - 1] == s2[j - 1] else 1
            curr_row[i] = min(
                prev_row[i] + 1,  # deletion
                curr_row[i - 1] + 1,  # insertion
                prev_row[i - 1] + cost,  # substitution
            )
            row_min = min(row_min, curr_row[i])

        if max_distance is not None and row_min > max_distance:
            return max_distance + 1

        prev_row, curr_row = curr_row, prev_row

    return prev_row[m]


def is_similar(a: str, b: str, threshold: int = DEFAULT_SIMILARITY_THRESHOLD) -> bool:
    """True when ``a`` and ``b`` are within ``threshold`` edits of each other."""
    if a == b:
        return True
    return levenshtein_distance(a, b, max_distance=threshold) <= threshold
