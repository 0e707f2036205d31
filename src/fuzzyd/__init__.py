"""
fuzzyd - fuzzy application launcher.

This package ranks launchable items (desktop applications and executables
on the search path) against a free-text query, biasing results toward
frequently launched items, and launches the selection through systemd-run.

Example usage:
    >>> from fuzzyd import CandidateItem, RankingEngine
    >>> engine = RankingEngine.open(history_path=None)
    >>> engine.add_items([CandidateItem(display="Firefox", identity="firefox")])
    1
    >>> [match.display for match in engine.rank("ff")]
    ['Firefox']
"""

from .errors import ConfigError, FuzzydError, LaunchError, ScoringError
from .matching import CandidateCollection, RankingEngine, UsageHistory, score
from .models import CandidateItem, ScoredMatch

__all__ = [
    # Models
    "CandidateItem",
    "ScoredMatch",
    # Matching
    "CandidateCollection",
    "RankingEngine",
    "UsageHistory",
    "score",
    # Errors
    "FuzzydError",
    "ConfigError",
    "LaunchError",
    "ScoringError",
]
