"""Fuzzy matching, de-duplication and ranking of launcher candidates."""

from .aggregator import CandidateCollection
from .engine import RankingEngine, order_matches
from .history import UsageHistory
from .scorer import is_acronym, is_subsequence, score

__all__ = [
    "CandidateCollection",
    "RankingEngine",
    "order_matches",
    "UsageHistory",
    "is_acronym",
    "is_subsequence",
    "score",
]
