"""
Data records shared by sources, the ranking engine and the launcher.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CandidateItem:
    """One launchable entity produced by a source."""

    display: str
    identity: str
    priority: int = 1
    source_rank: int = 0
    description: str = ""
    search_description: bool = False
    origin_path: str = ""
    icon: str = ""


@dataclass(frozen=True)
class ScoredMatch:
    """Ranked candidate for a single query."""

    score: float
    item: CandidateItem

    @property
    def identity(self) -> str:
        return self.item.identity

    @property
    def display(self) -> str:
        return self.item.display
