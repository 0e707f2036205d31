"""Candidate sources and the loader that merges them into an engine."""

from __future__ import annotations

from enum import Enum

from .base import Source, SourceBatch, load_sources, populate
from .desktop import DesktopSource, parse_desktop_file, parse_exec
from .path import PathSource


class SourceName(str, Enum):
    desktop = "desktop"
    path = "path"


def build_sources(names: list[SourceName] | None = None) -> list[Source]:
    """Instantiate sources by name; all sources when names is empty."""
    selected = names or list(SourceName)
    sources: list[Source] = []
    for name in dict.fromkeys(SourceName(name) for name in selected):
        if name is SourceName.desktop:
            sources.append(DesktopSource())
        else:
            sources.append(PathSource())
    return sources


__all__ = [
    "Source",
    "SourceBatch",
    "SourceName",
    "build_sources",
    "load_sources",
    "populate",
    "DesktopSource",
    "PathSource",
    "parse_desktop_file",
    "parse_exec",
]
