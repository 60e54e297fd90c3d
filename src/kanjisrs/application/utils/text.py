"""String distance helpers used for typo-tolerant answer matching."""


def levenshtein_distance(a: str, b: str) -> int:
    """
    Minimum number of single-character inserts, deletes and substitutions
    turning ``a`` into ``b``. Operates on code points.
    """
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            insertions = current[j - 1] + 1
            deletions = previous[j] + 1
            substitutions = previous[j - 1] + (char_a != char_b)
            current.append(min(insertions, deletions, substitutions))
        previous = current
    return previous[-1]


def distance_tolerance(answer: str) -> int:
    """How many edits a candidate answer of this length tolerates."""
    length = len(answer)
    if length <= 3:
        return 0
    if length <= 5:
        return 1
    if length <= 7:
        return 2
    return 2 + length // 7
