from pathlib import Path

import pytest

from fuzzyd.models import CandidateItem


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME and the XDG directories at a temporary location."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / ".config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / ".local" / "share"))
    monkeypatch.delenv("FUZZYD_HISTORY_FILE", raising=False)
    return home


class FakeSource:
    def __init__(self, name: str, source_rank: int, items: list[CandidateItem]) -> None:
        self.name = name
        self.source_rank = source_rank
        self._items = items

    def find_entries(self) -> list[CandidateItem]:
        return list(self._items)


@pytest.fixture
def fake_source():
    return FakeSource
