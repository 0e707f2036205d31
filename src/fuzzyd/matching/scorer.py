"""
Subsequence scorer used for every scored field of a candidate.

The score is computed with a small dynamic programme over a
(needle position, haystack position) matrix. Matching characters earn a
base reward plus positional bonuses (word starts, separators, camel case,
repeated characters, the first haystack character), skipped haystack
characters cost a gap penalty, and two flat bonuses reward acronym queries
and verbatim substrings.
"""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from functools import lru_cache

SCORE_MATCH = 16.0
SCORE_GAP_EXTENSION = -1.0

BONUS_CONSECUTIVE = 4.0
BONUS_SLASH = 3.0
BONUS_WORD = 20.0
BONUS_CAMEL = 2.0
BONUS_DOT = 1.0
BONUS_FIRST_CHAR_MATCH = 50.0
BONUS_CASE_MATCH = 8.0
BONUS_ACRONYM = 80.0

_WORD_SEPARATORS = frozenset("_-")


def _fold(char: str) -> str:
    # Keep one character per position so the folded text stays aligned
    # with the original (some characters lowercase to two code points).
    return char.lower()[:1] or char


def fold(text: str) -> str:
    """Case-fold text character by character."""
    return "".join(_fold(char) for char in text)


def is_subsequence(haystack: str, needle: str) -> bool:
    """Return True when every needle character occurs in haystack, in order."""
    position = 0
    for char in needle:
        position = haystack.find(char, position)
        if position < 0:
            return False
        position += 1
    return True


def _is_word_boundary(char: str) -> bool:
    return char.isspace() or char in _WORD_SEPARATORS


def position_bonus(haystack: str, index: int) -> float:
    """Bonus earned by a character match at ``haystack[index]``."""
    if index == 0:
        return BONUS_WORD

    bonus = 0.0
    current = haystack[index]
    previous = haystack[index - 1]

    if _is_word_boundary(previous):
        bonus += BONUS_WORD
    if previous == "/":
        bonus += BONUS_SLASH
    elif previous == ".":
        bonus += BONUS_DOT
    if current.isupper() and previous.islower():
        bonus += BONUS_CAMEL
    if current == previous:
        bonus += BONUS_CONSECUTIVE
    return bonus


@dataclass(frozen=True)
class PreparedText:
    """Query-independent data for one haystack, computed once and reused."""

    text: str
    folded: str
    bonuses: tuple[float, ...]
    positions: dict[str, list[int]]
    initials: str


@lru_cache(maxsize=65536)
def prepare(text: str) -> PreparedText:
    folded = fold(text)
    positions: dict[str, list[int]] = {}
    for index, char in enumerate(folded):
        positions.setdefault(char, []).append(index)
    return PreparedText(
        text=text,
        folded=folded,
        bonuses=tuple(position_bonus(text, index) for index in range(len(text))),
        positions=positions,
        initials="".join(_fold(word[0]) for word in text.split()),
    )


def is_acronym(haystack: str, needle: str) -> bool:
    """Return True when needle spells the first letters of haystack's words."""
    folded_needle = fold(needle)
    return bool(folded_needle) and prepare(haystack).initials.startswith(folded_needle)


def score(haystack: str, needle: str) -> float | None:
    """
    Score ``needle`` against ``haystack``.

    Returns 0.0 for an empty needle, None when the needle is not a
    case-insensitive ordered subsequence of the haystack, and a finite
    relevance score otherwise. Higher is better; the score may be negative
    for long haystacks with an early, scattered match.
    """
    if not needle:
        return 0.0
    return score_prepared(prepare(haystack), needle, fold(needle))


def score_prepared(
    prepared: PreparedText, needle: str, folded_needle: str
) -> float | None:
    """Score against a prepared haystack; ``folded_needle`` is ``fold(needle)``."""
    if not folded_needle:
        return 0.0
    if not is_subsequence(prepared.folded, folded_needle):
        return None

    total = _matrix_score(prepared, folded_needle)
    if prepared.initials.startswith(folded_needle):
        total += BONUS_ACRONYM * len(folded_needle)
    if needle in prepared.text:
        total += BONUS_CASE_MATCH
    return total


def _row_score_at(
    row: int, scores: dict[int, float], positions: list[int], column: int
) -> float:
    # Row 0 keeps values only on matching cells. Later rows carry the last
    # match to the right, losing the gap penalty per column, and start from
    # zero just left of the diagonal.
    if row == 0:
        return scores.get(column, 0.0)
    index = bisect_right(positions, column)
    if index == 0:
        return (column - row + 1) * SCORE_GAP_EXTENSION
    last = positions[index - 1]
    return scores[last] + (column - last) * SCORE_GAP_EXTENSION


def _matrix_score(prepared: PreparedText, folded_needle: str) -> float:
    """
    Value of the last matrix cell, visiting only matching cells.

    Equivalent to filling the full (needle x haystack) matrix: a
    non-matching cell only extends its left neighbour with the gap penalty,
    so each row is determined by its matching cells.
    """
    bonuses = prepared.bonuses
    last_column = len(prepared.folded) - 1
    rows = len(folded_needle)

    positions = prepared.positions.get(folded_needle[0], [])
    scores: dict[int, float] = {}
    diagonals: dict[int, float] = {}
    for j in positions:
        value = SCORE_MATCH + bonuses[j]
        if j == 0:
            value += BONUS_FIRST_CHAR_MATCH
        scores[j] = value
        diagonals[j] = value

    run_bonus = BONUS_CONSECUTIVE * rows
    for i in range(1, rows):
        candidates = prepared.positions.get(folded_needle[i], [])
        row_positions: list[int] = []
        row_scores: dict[int, float] = {}
        row_diagonals: dict[int, float] = {}
        for j in candidates[bisect_left(candidates, i):]:
            value = SCORE_MATCH + bonuses[j]
            if i == j:
                value += run_bonus
            diagonal = value + diagonals.get(j - 1, 0.0)
            above = _row_score_at(i - 1, scores, positions, j) + SCORE_GAP_EXTENSION
            row_positions.append(j)
            row_diagonals[j] = diagonal
            row_scores[j] = max(diagonal, above)
        positions, scores, diagonals = row_positions, row_scores, row_diagonals

    return _row_score_at(rows - 1, scores, positions, last_column)
