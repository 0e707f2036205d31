"""
Cross-source de-duplication of candidate items.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from ..models import CandidateItem


class CandidateCollection:
    """
    Candidate items keyed by identity, at most one item per identity.

    When two sources produce the same identity the item with the lower
    ``source_rank`` wins; on equal rank the item already present is kept.
    """

    def __init__(self, items: Iterable[CandidateItem] = ()) -> None:
        self._items: dict[str, CandidateItem] = {}
        self.merge(items)

    def merge(self, batch: Iterable[CandidateItem]) -> int:
        """Fold a batch into the collection and return how many items it changed."""
        changed = 0
        for item in batch:
            existing = self._items.get(item.identity)
            if existing is None or item.source_rank < existing.source_rank:
                self._items[item.identity] = item
                changed += 1
        return changed

    def get(self, identity: str) -> CandidateItem | None:
        return self._items.get(identity)

    def __contains__(self, identity: object) -> bool:
        return identity in self._items

    def __iter__(self) -> Iterator[CandidateItem]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)
