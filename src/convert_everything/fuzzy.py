"""Fuzzy matching for converter search."""

from typing import Callable, Iterable, Sequence, TypeVar

T = TypeVar("T")

WORD_BOUNDARIES = " -_"


def fuzzy_match(query: str, target: str) -> float:
    """
    Score how well ``query`` matches ``target``.

    A substring match always beats a subsequence match. Otherwise every
    query character must appear in order; consecutive runs and matches at
    word starts score higher. Returns 0 when there is no match.
    """
    q = query.lower()
    t = target.lower()

    if not q:
        return 0.0

    if q in t:
        return 100 + (len(q) / len(t)) * 50

    qi = 0
    score = 0.0
    consecutive = 0
    last_idx = -2

    for ti, ch in enumerate(t):
        if qi >= len(q):
            break
        if ch != q[qi]:
            continue
        qi += 1
        if ti == last_idx + 1:
            consecutive += 1
            score += consecutive * 2
        else:
            consecutive = 0
        if ti == 0 or t[ti - 1] in WORD_BOUNDARIES:
            score += 5
        score += 1
        last_idx = ti

    if qi < len(q):
        return 0.0

    return score


def fuzzy_filter(
    query: str,
    items: Sequence[T],
    get_texts: Callable[[T], Iterable[str]],
) -> list[T]:
    """Return the items matching ``query``, best match first.

    A blank query returns every item in its original order. Ties keep
    their original relative order.
    """
    if not query.strip():
        return list(items)

    scored = []
    for item in items:
        best = max((fuzzy_match(query, text) for text in get_texts(item)), default=0.0)
        if best > 0:
            scored.append((best, item))

    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [item for _, item in scored]
