"""
Executables found on the search path.
"""

from __future__ import annotations

import os
import shlex
import stat

from ..models import CandidateItem

PATH_SOURCE_RANK = 1
PATH_PRIORITY = 1
PATH_DESCRIPTION = "Executable in PATH"


def is_executable(path: str) -> bool:
    """Return True for regular files with the owner-execute bit set."""
    try:
        mode = os.stat(path).st_mode
    except OSError:
        return False
    return stat.S_ISREG(mode) and bool(mode & stat.S_IXUSR)


def search_directories(path_value: str | None) -> list[str]:
    """Canonicalise and de-duplicate PATH entries, keeping their order."""
    if not path_value:
        return []
    directories: dict[str, None] = {}
    for entry in path_value.split(os.pathsep):
        if not entry:
            continue
        resolved = os.path.realpath(entry)
        if os.path.isdir(resolved):
            directories.setdefault(resolved, None)
    return list(directories)


class PathSource:
    """Candidate source for executables in ``$PATH``."""

    name = "path"
    source_rank = PATH_SOURCE_RANK

    def __init__(self, path_value: str | None = None) -> None:
        self._path_value = path_value

    def find_entries(self) -> list[CandidateItem]:
        path_value = self._path_value
        if path_value is None:
            path_value = os.environ.get("PATH", "")

        executables: dict[str, str] = {}
        for directory in search_directories(path_value):
            try:
                names = sorted(os.listdir(directory))
            except OSError:
                continue
            for name in names:
                if name in executables:
                    continue
                candidate = os.path.join(directory, name)
                if is_executable(candidate):
                    executables[name] = os.path.realpath(candidate)

        return [
            CandidateItem(
                display=name,
                identity=shlex.quote(real_path),
                priority=PATH_PRIORITY,
                source_rank=self.source_rank,
                description=PATH_DESCRIPTION,
                search_description=False,
                origin_path=real_path,
            )
            for name, real_path in executables.items()
        ]
