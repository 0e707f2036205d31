"""
Query ranking over the in-memory candidate collection.
"""

from __future__ import annotations

import math
import os
from collections.abc import Iterable

from ..errors import ScoringError
from ..models import CandidateItem, ScoredMatch
from .aggregator import CandidateCollection
from .history import UsageHistory
from .scorer import fold, prepare, score_prepared

HISTORY_WEIGHT = 10.0
IDENTITY_WEIGHT = 0.8
DESCRIPTION_WEIGHT = 0.6
ORIGIN_PATH_WEIGHT = 0.4


def order_matches(
    matches: list[ScoredMatch], *, limit: int | None = None
) -> list[ScoredMatch]:
    """Sort matches by descending score, identity breaking ties, and apply limit."""
    for match in matches:
        if not math.isfinite(match.score):
            raise ScoringError(
                f"Non-finite score {match.score!r} for {match.identity!r}"
            )
    ordered = sorted(matches, key=lambda match: (-match.score, match.identity))
    if limit is None:
        return ordered
    return ordered[: max(limit, 0)]


def _field_score(haystack: str, query: str, folded_query: str) -> float | None:
    return score_prepared(prepare(haystack), query, folded_query)


def _secondary_score(haystack: str, query: str, folded_query: str) -> float:
    value = _field_score(haystack, query, folded_query)
    if value is None:
        return 0.0
    return max(value, 0.0)


class RankingEngine:
    """Rank candidates for a query, boosted by usage history and priority."""

    def __init__(
        self,
        history: UsageHistory | None = None,
        collection: CandidateCollection | None = None,
    ) -> None:
        self.history = history if history is not None else UsageHistory()
        self.collection = collection if collection is not None else CandidateCollection()

    @classmethod
    def open(cls, history_path: str | os.PathLike[str] | None = None) -> "RankingEngine":
        return cls(history=UsageHistory(history_path))

    def add_items(self, items: Iterable[CandidateItem]) -> int:
        return self.collection.merge(items)

    def item_count(self) -> int:
        return len(self.collection)

    def __len__(self) -> int:
        return len(self.collection)

    def record_usage(self, identity: str) -> int:
        return self.history.record_usage(identity)

    def history_boost(self, identity: str) -> float:
        return self.history.get_count(identity) * HISTORY_WEIGHT

    def rank(self, query: str, *, limit: int | None = None) -> list[ScoredMatch]:
        query = query.lower()
        if not query:
            matches = [
                ScoredMatch(item.priority + self.history_boost(item.identity), item)
                for item in self.collection
            ]
            return order_matches(matches, limit=limit)

        folded_query = fold(query)
        matches = []
        for item in self.collection:
            field_score = self.field_score(item, query, folded_query)
            if field_score <= 0:
                continue
            boosted = field_score + self.history_boost(item.identity)
            # Priority scales the query score; it is only added on the empty query.
            matches.append(ScoredMatch(boosted * item.priority, item))
        return order_matches(matches, limit=limit)

    @staticmethod
    def field_score(
        item: CandidateItem, query: str, folded_query: str | None = None
    ) -> float:
        """Weighted sum of per-field scores for an already lowercased query."""
        if folded_query is None:
            folded_query = fold(query)
        total = _field_score(item.display, query, folded_query) or 0.0
        if item.identity != item.display:
            total += _secondary_score(item.identity, query, folded_query) * IDENTITY_WEIGHT
        if item.search_description:
            total += _secondary_score(item.description, query, folded_query) * DESCRIPTION_WEIGHT
        if item.origin_path != item.identity:
            total += _secondary_score(item.origin_path, query, folded_query) * ORIGIN_PATH_WEIGHT
        return total
