"""
Persisted usage counters used to bias ranking toward frequent picks.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

_FIELD_SEPARATOR = "\t"
_UNSAFE_CHARACTERS = frozenset("\t\r\n")


def _target_mode(file_path: Path) -> int:
    """Permission bits for a rewritten history file: keep the old ones, else honour the umask."""
    try:
        return stat.S_IMODE(os.stat(file_path).st_mode)
    except OSError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def parse_history_line(line: str) -> tuple[str, int] | None:
    """Parse one ``identity<TAB>count`` record, returning None when malformed."""
    parts = line.rstrip("\r\n").split(_FIELD_SEPARATOR)
    if len(parts) != 2:
        return None
    identity, raw_count = parts
    if not (raw_count.isascii() and raw_count.isdigit()):
        return None
    return identity, int(raw_count)


class UsageHistory:
    """
    Mapping from item identity to launch count.

    Without a file path the store is always empty and recording is a no-op.
    With a path, counts are loaded at construction and the whole file is
    rewritten after every recorded use.
    """

    def __init__(self, file_path: str | os.PathLike[str] | None = None) -> None:
        self.file_path = Path(file_path) if file_path is not None else None
        self._counts: dict[str, int] = {}
        if self.file_path is not None:
            self._counts = self._load(self.file_path)

    @property
    def enabled(self) -> bool:
        return self.file_path is not None

    def get_count(self, identity: str) -> int:
        if self.file_path is None:
            return 0
        return self._counts.get(identity, 0)

    def record_usage(self, identity: str) -> int:
        """Increment the count for identity, persist, and return the new count."""
        if self.file_path is None:
            return 0
        count = self._counts.get(identity, 0) + 1
        self._counts[identity] = count
        self._save(self.file_path)
        return count

    def counts(self) -> dict[str, int]:
        return dict(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    @staticmethod
    def _load(file_path: Path) -> dict[str, int]:
        counts: dict[str, int] = {}
        try:
            with open(file_path, "rb") as handle:
                for raw_line in handle:
                    try:
                        line = raw_line.decode("utf-8")
                    except UnicodeDecodeError:
                        logger.debug("Skipping undecodable history line in %s", file_path)
                        continue
                    record = parse_history_line(line)
                    if record is None:
                        continue
                    identity, count = record
                    counts[identity] = count
        except FileNotFoundError:
            logger.debug("No history file at %s", file_path)
        except OSError as exc:
            logger.warning("Ignoring unreadable history file %s: %s", file_path, exc)
            return {}
        return counts

    def _save(self, file_path: Path) -> None:
        lines: list[str] = []
        for identity in sorted(self._counts):
            if _UNSAFE_CHARACTERS.intersection(identity):
                logger.warning("Not persisting history for identity %r", identity)
                continue
            lines.append(f"{identity}{_FIELD_SEPARATOR}{self._counts[identity]}\n")

        mode = _target_mode(file_path)
        try:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(
                prefix=f".{file_path.name}.", dir=file_path.parent
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    os.fchmod(handle.fileno(), mode)
                    handle.writelines(lines)
                os.replace(temp_name, file_path)
            except BaseException:
                os.unlink(temp_name)
                raise
        except OSError as exc:
            logger.warning("Could not save history to %s: %s", file_path, exc)
