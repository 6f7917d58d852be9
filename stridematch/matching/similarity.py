"""Edit-distance similarity between normalized phrases."""


def levenshtein(a: str, b: str) -> int:
    """Compute the Levenshtein distance between two strings.

    Insertions, deletions and substitutions each cost 1.
    """
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(1 + min(
                    previous[j],  # deletion
                    current[j - 1],  # insertion
                    previous[j - 1],  # substitution
                ))
        previous = current
    return previous[-1]


def similarity(a: str, b: str) -> float:
    """Similarity score in [0, 1] derived from edit distance.

    Args:
        a: First phrase
        b: Second phrase

    Returns:
        1 - distance / longest length. Two empty phrases score 1.0,
        exactly one empty phrase scores 0.0.
    """
    a_clean = a.strip()
    b_clean = b.strip()
    if not a_clean and not b_clean:
        return 1.0
    if not a_clean or not b_clean:
        return 0.0
    distance = levenshtein(a_clean, b_clean)
    return 1 - distance / max(len(a_clean), len(b_clean))
