"""Similar-name suggestions for capability lookups."""


def _edit_distance(a: str, b: str) -> int:
    """Levenshtein distance between two strings."""
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, ca in enumerate(a, 1):
        current = [i]
        for j, cb in enumerate(b, 1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (ca != cb),
                )
            )
        previous = current
    return previous[-1]


def string_similarity(a: str, b: str) -> float:
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - _edit_distance(a, b)) / longest


def _normalize(name: str) -> str:
    return name.lower().replace("-", "")


def _score(target: str, candidate: str) -> float:
    normalized_target = _normalize(target)
    normalized = _normalize(candidate)

    if normalized == normalized_target:
        return 100
    if normalized.startswith(normalized_target):
        return 90 - (len(normalized) - len(normalized_target))
    if "-" in candidate:
        abbreviation = "".join(part[:1] for part in candidate.split("-")).lower()
        if abbreviation == normalized_target:
            return 80
    if normalized_target in normalized:
        return 70 - (len(normalized) - len(normalized_target))

    similarity = string_similarity(normalized_target, normalized)
    return similarity * 60 if similarity > 0.6 else 0


def find_similar(target: str, candidates: list[str], max_results: int = 3) -> list[str]:
    """Return up to max_results candidates that look like target, best first.

    Examples:
        >>> find_similar("eslnt", ["eslint", "prettier", "typescript"])
        ['eslint']

        >>> find_similar("ts", ["typescript", "tailwind-setup"])
        ['tailwind-setup']
    """
    if not _normalize(target):
        return []
    scored = [(candidate, _score(target, candidate)) for candidate in candidates]
    ranked = sorted(
        (item for item in scored if item[1] > 30), key=lambda item: item[1], reverse=True
    )
    return [candidate for candidate, _ in ranked[:max_results]]
