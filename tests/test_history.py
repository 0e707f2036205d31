"""Tests for the persisted usage history."""

import os
import stat
from pathlib import Path

from fuzzyd.matching.history import UsageHistory, parse_history_line


def test_history_without_path_is_always_empty() -> None:
    history = UsageHistory()

    assert history.enabled is False
    assert history.record_usage("firefox") == 0
    assert history.get_count("firefox") == 0
    assert len(history) == 0


def test_history_round_trip(tmp_path: Path) -> None:
    history_file = tmp_path / "fuzzyd.history"
    history = UsageHistory(history_file)
    for identity in ["firefox", "htop", "firefox", "/usr/bin/vim", "firefox"]:
        history.record_usage(identity)

    reloaded = UsageHistory(history_file)

    assert reloaded.counts() == {"firefox": 3, "htop": 1, "/usr/bin/vim": 1}
    assert reloaded.counts() == history.counts()


def test_history_rewrites_whole_file_sorted(tmp_path: Path) -> None:
    history_file = tmp_path / "fuzzyd.history"
    history = UsageHistory(history_file)
    history.record_usage("zsh")
    history.record_usage("alacritty")
    history.record_usage("zsh")

    assert history_file.read_text() == "alacritty\t1\nzsh\t2\n"


def test_missing_history_file_is_not_created_on_load(tmp_path: Path) -> None:
    history_file = tmp_path / "nested" / "fuzzyd.history"
    history = UsageHistory(history_file)

    assert history.get_count("anything") == 0
    assert not history_file.exists()

    history.record_usage("anything")
    assert history_file.read_text() == "anything\t1\n"


def test_malformed_history_lines_are_skipped(tmp_path: Path) -> None:
    history_file = tmp_path / "fuzzyd.history"
    history_file.write_text(
        "good\t3\n"
        "no separator\n"
        "negative\t-1\n"
        "word\tabc\n"
        "three\t1\t2\n"
        "spaced\t 4\n"
        "\n"
    )

    history = UsageHistory(history_file)

    assert history.counts() == {"good": 3}


def test_unreadable_history_degrades_to_empty(tmp_path: Path) -> None:
    history_dir = tmp_path / "history-is-a-directory"
    history_dir.mkdir()

    history = UsageHistory(history_dir)

    assert history.get_count("firefox") == 0
    # Saving onto a directory fails; the failure stays local.
    assert history.record_usage("firefox") == 1
    assert history.get_count("firefox") == 1
    assert not [path for path in tmp_path.iterdir() if path.name.startswith(".")]


def test_identities_with_separators_are_not_persisted(tmp_path: Path) -> None:
    history_file = tmp_path / "fuzzyd.history"
    history = UsageHistory(history_file)
    history.record_usage("bad\tidentity")
    history.record_usage("good")

    assert history.get_count("bad\tidentity") == 1
    assert history_file.read_text() == "good\t1\n"


def test_parse_history_line() -> None:
    assert parse_history_line("firefox\t12\n") == ("firefox", 12)
    assert parse_history_line("firefox\t12\r\n") == ("firefox", 12)
    assert parse_history_line("firefox 12") is None
    assert parse_history_line("firefox\t+1") is None
    assert parse_history_line("firefox\t١٢") is None


def test_undecodable_line_skips_only_that_line(tmp_path: Path) -> None:
    history_file = tmp_path / "fuzzyd.history"
    history_file.write_bytes(b"firefox\t42\nbad\xff\t1\nhtop\t7\n")

    history = UsageHistory(history_file)
    assert history.counts() == {"firefox": 42, "htop": 7}

    history.record_usage("vim")
    assert history_file.read_text() == "firefox\t42\nhtop\t7\nvim\t1\n"


def test_rewrite_keeps_existing_permissions(tmp_path: Path) -> None:
    history_file = tmp_path / "fuzzyd.history"
    history_file.write_text("firefox\t1\n")
    history_file.chmod(0o640)

    UsageHistory(history_file).record_usage("firefox")

    assert stat.S_IMODE(history_file.stat().st_mode) == 0o640
    assert history_file.read_text() == "firefox\t2\n"


def test_new_history_file_honours_umask(tmp_path: Path) -> None:
    history_file = tmp_path / "fuzzyd.history"
    previous = os.umask(0o022)
    try:
        UsageHistory(history_file).record_usage("firefox")
    finally:
        os.umask(previous)

    assert stat.S_IMODE(history_file.stat().st_mode) == 0o644
