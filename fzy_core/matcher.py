"""Fuzzy subsequence scoring and ranking (fzy-style).

A query matches a candidate when its characters appear, case-insensitively,
in order within the candidate.  Among matches, the score prefers:

- consecutive runs of matched characters,
- matches at the start of the candidate or right after a separator
  (``/``, ``-``, ``_``, space, ``.``) or at a camelCase hump,
- shorter candidates (every unmatched character costs a small gap penalty).

The score is computed with two DP matrices over (query index i, candidate
index j):

    M[i][j]  best score for query[:i+1] with candidate[j] matched to query[i]
    B[i][j]  best score for query[:i+1] within candidate[:j+1]

Everything in this module is pure; ``rank`` recomputes from scratch on each
call.
"""

from dataclasses import dataclass
from typing import Iterable, Sequence

SCORE_MIN = float("-inf")
SCORE_MAX = float("inf")

SCORE_GAP_LEADING = -0.005
SCORE_GAP_TRAILING = -0.005
SCORE_GAP_INNER = -0.01
SCORE_MATCH_CONSECUTIVE = 1.0
SCORE_MATCH_SLASH = 0.9
SCORE_MATCH_WORD = 0.8
SCORE_MATCH_CAPITAL = 0.7
SCORE_MATCH_DOT = 0.6

# Longer candidates still match but are not scored
MATCH_MAX_LEN = 1024

_WORD_SEPARATORS = "-_ "


@dataclass(frozen=True)
class ScoredMatch:
    """A candidate that matched the current query."""
    candidate: str
    score: float
    positions: tuple[int, ...]
    index: int


def _bonus(prev: str, ch: str) -> float:
    """Boundary bonus for matching *ch* when it follows *prev*."""
    if ch.islower() or ch.isdigit():
        if prev == "/":
            return SCORE_MATCH_SLASH
        if prev in _WORD_SEPARATORS:
            return SCORE_MATCH_WORD
        if prev == ".":
            return SCORE_MATCH_DOT
        return 0.0
    if ch.isupper():
        if prev == "/":
            return SCORE_MATCH_SLASH
        if prev in _WORD_SEPARATORS:
            return SCORE_MATCH_WORD
        if prev == ".":
            return SCORE_MATCH_DOT
        if prev.islower():
            return SCORE_MATCH_CAPITAL
    return 0.0


def _bonuses(candidate: str) -> list[float]:
    prev = "/"
    out = []
    for ch in candidate:
        out.append(_bonus(prev, ch))
        prev = ch
    return out


def _fold(text: str) -> list[str]:
    # Per character, so indices keep pointing into the original string
    return [ch.lower() for ch in text]


def has_match(query: str, candidate: str) -> bool:
    """Return True if *query* is a case-insensitive subsequence of *candidate*."""
    it = iter(_fold(candidate))
    return all(ch in it for ch in _fold(query))


def _compute(query: str, candidate: str) -> tuple[list[list[float]], list[list[float]]]:
    """Fill the M (match-at-j) and B (best-up-to-j) matrices."""
    n = len(query)
    m = len(candidate)
    q = _fold(query)
    c = _fold(candidate)
    bonus = _bonuses(candidate)

    match_rows: list[list[float]] = []
    best_rows: list[list[float]] = []
    for i in range(n):
        match_row = [SCORE_MIN] * m
        best_row = [SCORE_MIN] * m
        prev_best = SCORE_MIN
        gap = SCORE_GAP_TRAILING if i == n - 1 else SCORE_GAP_INNER
        for j in range(m):
            if q[i] == c[j]:
                if i == 0:
                    s = j * SCORE_GAP_LEADING + bonus[j]
                elif j > 0:
                    s = max(best_rows[i - 1][j - 1] + bonus[j],
                            match_rows[i - 1][j - 1] + SCORE_MATCH_CONSECUTIVE)
                else:
                    s = SCORE_MIN
                match_row[j] = s
                prev_best = max(s, prev_best + gap)
            else:
                prev_best = prev_best + gap
            best_row[j] = prev_best
        match_rows.append(match_row)
        best_rows.append(best_row)
    return match_rows, best_rows


def _backtrack(match_rows: list[list[float]], best_rows: list[list[float]],
               n: int, m: int) -> tuple[int, ...]:
    positions = [0] * n
    match_required = False
    j = m - 1
    for i in range(n - 1, -1, -1):
        while j >= 0:
            here = match_rows[i][j]
            if here != SCORE_MIN and (match_required or here == best_rows[i][j]):
                # Stay on a consecutive chain if that is how we got here
                match_required = (
                    i > 0 and j > 0
                    and here == match_rows[i - 1][j - 1] + SCORE_MATCH_CONSECUTIVE
                )
                positions[i] = j
                j -= 1
                break
            j -= 1
    return tuple(positions)


def score(query: str, candidate: str) -> tuple[float, tuple[int, ...]] | None:
    """Score *candidate* against *query*.

    Returns ``(score, positions)`` or None when the candidate does not
    match.  An empty query matches everything with ``SCORE_MAX`` and no
    positions.  *positions* index characters of the original candidate.
    """
    if not query:
        return SCORE_MAX, ()
    if not has_match(query, candidate):
        return None

    n = len(query)
    m = len(candidate)
    if n == m:
        # Subsequence of equal length: the same string modulo case
        return SCORE_MAX, tuple(range(n))
    if m > MATCH_MAX_LEN:
        return SCORE_MIN, ()

    match_rows, best_rows = _compute(query, candidate)
    total = best_rows[n - 1][m - 1]
    return total, _backtrack(match_rows, best_rows, n, m)


def rank(query: str, candidates: Iterable[str],
         threshold: float = SCORE_MIN) -> list[ScoredMatch]:
    """Score all *candidates* and return the matches, best first.

    Matches scoring at or below *threshold* are dropped, except that the
    default threshold keeps everything that matched at all.  Equal scores
    keep the candidates' original order.
    """
    matches = []
    for index, candidate in enumerate(candidates):
        result = score(query, candidate)
        if result is None:
            continue
        value, positions = result
        if threshold != SCORE_MIN and value <= threshold:
            continue
        matches.append(ScoredMatch(candidate, value, positions, index))
    matches.sort(key=lambda sm: (-sm.score, sm.index))
    return matches


def highlight_spans(candidate: str, positions: Sequence[int]) -> list[tuple[str, bool]]:
    """Split *candidate* into runs of (text, matched) for rendering."""
    marked = set(positions)
    spans: list[tuple[str, bool]] = []
    for i, ch in enumerate(candidate):
        hit = i in marked
        if spans and spans[-1][1] == hit:
            spans[-1] = (spans[-1][0] + ch, hit)
        else:
            spans.append((ch, hit))
    return spans
