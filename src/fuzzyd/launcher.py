"""
Launch selected candidates as transient systemd user units.
"""

from __future__ import annotations

import logging
import os
import random
import re
import shlex
import shutil
import subprocess
from typing import Callable, Sequence

from rich.console import Console

from .errors import LaunchError
from .models import CandidateItem

logger = logging.getLogger(__name__)

SYSTEMD_RUN = "/usr/bin/systemd-run"

ENV_VAR_RE = re.compile(r"\$([A-Za-z_][A-Za-z0-9_]*)")
_UNIT_STRIP_RE = re.compile(r"[^\w\- ]|_")


def expand_env_vars(value: str, environ: dict[str, str] | None = None) -> str:
    """Replace ``$NAME`` with its environment value, leaving unknown names as-is."""
    env = os.environ if environ is None else environ
    return ENV_VAR_RE.sub(lambda match: env.get(match.group(1), match.group(0)), value)


def unit_name(display: str, suffix: int) -> str:
    slug = _UNIT_STRIP_RE.sub("", display)
    slug = slug.replace("-", "_").replace(" ", "_").lower()
    return f"app-fuzzyd-{slug}-{suffix:06d}"


def split_command(command: str) -> tuple[str, list[str]]:
    """
    Split a command line into executable and arguments.

    The executable is the longest run of leading tokens naming an existing
    path, which keeps unquoted paths with spaces intact. A bare first token
    is accepted when it resolves on ``$PATH``.
    """
    try:
        parts = shlex.split(command)
    except ValueError:
        parts = command.split()
    if not parts:
        raise LaunchError("Executable not found: empty command")

    for end in range(len(parts), 0, -1):
        candidate = " ".join(parts[:end])
        if os.path.exists(candidate):
            return candidate, parts[end:]

    resolved = shutil.which(parts[0])
    if resolved is not None:
        return resolved, parts[1:]
    raise LaunchError(f"Executable not found: {command}")


class SystemdLauncher:
    """Run candidate commands through ``systemd-run``."""

    def __init__(
        self,
        parameters: Sequence[str] = (),
        *,
        dry_run: bool = False,
        runner: Callable[..., object] = subprocess.run,
        console: Console | None = None,
        systemd_run: str = SYSTEMD_RUN,
    ) -> None:
        self.parameters = [expand_env_vars(param) for param in parameters]
        self.dry_run = dry_run
        self._runner = runner
        self._console = console or Console()
        self._systemd_run = systemd_run

    def build_command(self, item: CandidateItem) -> list[str]:
        executable, arguments = split_command(item.identity)
        unit = unit_name(item.display, random.randint(100_000, 999_999))
        return [
            self._systemd_run,
            *self.parameters,
            "--unit",
            unit,
            executable,
            *arguments,
        ]

    def launch(self, item: CandidateItem) -> list[str]:
        command = self.build_command(item)
        if self.dry_run:
            self._console.print(f"Dry run: {shlex.join(command)}", highlight=False)
            return command

        logger.debug("Launching %s", shlex.join(command))
        try:
            self._runner(command, check=False)
        except OSError as exc:
            raise LaunchError(f"Failed to launch {item.display}: {exc}") from exc
        return command
