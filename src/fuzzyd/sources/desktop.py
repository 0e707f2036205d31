"""
Applications declared by freedesktop.org ``.desktop`` entries.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from ..models import CandidateItem

logger = logging.getLogger(__name__)

DESKTOP_SOURCE_RANK = 0
DESKTOP_PRIORITY = 2
NO_DESCRIPTION = "No description"

MAIN_SECTION = "Desktop Entry"
ACTION_PREFIX = "Desktop Action "

# Exec field codes that expand to files, URLs or deprecated values.
FIELD_CODE_RE = re.compile(r"%[fFuUdDnNvmck]")


def data_directories(environ: dict[str, str] | None = None) -> list[Path]:
    """Return XDG data directories, system ones first and the user's last."""
    env = os.environ if environ is None else environ
    home = Path(env.get("HOME") or Path.home())
    data_dirs = env.get("XDG_DATA_DIRS") or "/usr/local/share:/usr/share"
    data_home = env.get("XDG_DATA_HOME") or str(home / ".local" / "share")

    directories: list[Path] = [Path(entry) for entry in data_dirs.split(":") if entry]
    directories.append(Path(data_home))
    return directories


def parse_exec(exec_value: str, icon: str) -> str:
    """Strip field codes from an Exec value and expand ``%i``."""
    parsed = FIELD_CODE_RE.sub("", exec_value)
    parsed = parsed.replace("%i", f"--icon {icon}")
    parsed = parsed.strip()
    parsed = parsed.removeprefix('"').removesuffix('"')
    return parsed


def read_sections(path: Path) -> dict[str, dict[str, str]]:
    """Read key/value pairs grouped by section from a desktop entry file."""
    sections: dict[str, dict[str, str]] = {}
    current: str | None = None
    with open(path, "r", encoding="utf-8", errors="replace") as handle:
        for raw_line in handle:
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue
            if line.startswith("[") and line.endswith("]"):
                current = line[1:-1]
                sections.setdefault(current, {})
                continue
            if current is None or "=" not in line:
                continue
            key, value = line.split("=", 1)
            sections[current][key.strip()] = value.strip()
    return sections


def parse_desktop_file(path: Path) -> list[CandidateItem]:
    """Build candidates for the main entry and every action of a desktop file."""
    try:
        sections = read_sections(path)
    except OSError as exc:
        logger.debug("Skipping unreadable desktop file %s: %s", path, exc)
        return []

    main = sections.get(MAIN_SECTION, {})
    if main.get("Hidden", "").lower() == "true":
        return []
    icon = main.get("Icon", "")

    items: list[CandidateItem] = []
    main_item = _make_item(main, icon=icon, path=path, section=MAIN_SECTION)
    if main_item is not None:
        items.append(main_item)

    for section, values in sections.items():
        if not section.startswith(ACTION_PREFIX):
            continue
        action_item = _make_item(values, icon=icon, path=path, section=section)
        if action_item is not None:
            items.append(action_item)
    return items


def _make_item(
    values: dict[str, str], *, icon: str, path: Path, section: str
) -> CandidateItem | None:
    name = values.get("Name")
    exec_value = values.get("Exec")
    if not name or not exec_value:
        return None

    if section.startswith(ACTION_PREFIX):
        display = f"{name} ({section.removeprefix(ACTION_PREFIX)})"
        origin_path = f"{path}:{section}"
    else:
        display = name
        origin_path = str(path)

    comment = values.get("Comment", "")
    return CandidateItem(
        display=display,
        identity=parse_exec(exec_value, icon),
        priority=DESKTOP_PRIORITY,
        source_rank=DESKTOP_SOURCE_RANK,
        description=comment or NO_DESCRIPTION,
        search_description=bool(comment),
        origin_path=origin_path,
        icon=icon,
    )


class DesktopSource:
    """Candidate source for XDG application entries."""

    name = "desktop"
    source_rank = DESKTOP_SOURCE_RANK

    def __init__(self, directories: list[Path] | None = None) -> None:
        self._directories = directories

    def find_entries(self) -> list[CandidateItem]:
        directories = self._directories
        if directories is None:
            directories = data_directories()

        items: list[CandidateItem] = []
        for directory in directories:
            applications = directory / "applications"
            if not applications.is_dir():
                continue
            for entry_path in sorted(applications.rglob("*.desktop")):
                if entry_path.is_file():
                    items.extend(parse_desktop_file(entry_path))
        return items
