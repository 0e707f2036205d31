"""
Source protocol and the parallel loader that feeds the ranking engine.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, replace
from typing import Protocol, Sequence

from ..matching import RankingEngine
from ..models import CandidateItem

logger = logging.getLogger(__name__)


class Source(Protocol):
    """Producer of candidate items with a fixed precedence."""

    name: str
    source_rank: int

    def find_entries(self) -> list[CandidateItem]:
        """Enumerate the candidates this source knows about."""


@dataclass(frozen=True)
class SourceBatch:
    """Items produced by one source in one load."""

    source: Source
    items: tuple[CandidateItem, ...]
    elapsed: float


def _collect(source: Source) -> SourceBatch:
    start = time.perf_counter()
    try:
        items = tuple(source.find_entries())
    except Exception:
        logger.exception("Source %s failed to enumerate candidates", source.name)
        items = ()
    return SourceBatch(source=source, items=items, elapsed=time.perf_counter() - start)


def load_sources(
    sources: Sequence[Source], *, max_workers: int | None = None
) -> list[SourceBatch]:
    """Enumerate every source concurrently, returning batches in source order."""
    if not sources:
        return []
    workers = max_workers or len(sources)
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [executor.submit(_collect, source) for source in sources]
        return [future.result() for future in futures]


def _stamp_rank(
    items: tuple[CandidateItem, ...], source_rank: int
) -> list[CandidateItem]:
    # A source's precedence applies to every item it yields.
    return [
        item if item.source_rank == source_rank else replace(item, source_rank=source_rank)
        for item in items
    ]


def populate(
    engine: RankingEngine,
    sources: Sequence[Source],
    *,
    max_workers: int | None = None,
) -> int:
    """Load all sources in parallel and merge their batches into engine."""
    start = time.perf_counter()
    total = 0
    for batch in load_sources(sources, max_workers=max_workers):
        engine.add_items(_stamp_rank(batch.items, batch.source.source_rank))
        total += len(batch.items)
        logger.debug(
            "Loaded %d items from %s source in %.3fs",
            len(batch.items),
            batch.source.name,
            batch.elapsed,
        )
    logger.debug(
        "Merged %d items into %d candidates in %.3fs",
        total,
        engine.item_count(),
        time.perf_counter() - start,
    )
    return engine.item_count()
