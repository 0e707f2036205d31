"""CLI tests for the interactive, search, exec and init commands."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

import fuzzyd.main as main_module
from fuzzyd.errors import LaunchError
from fuzzyd.launcher import SystemdLauncher
from fuzzyd.matching import RankingEngine, UsageHistory
from fuzzyd.models import CandidateItem


@pytest.fixture
def launchable(tmp_path: Path) -> Path:
    app = tmp_path / "bin" / "barbaz"
    app.parent.mkdir()
    app.write_text("#!/bin/sh\n")
    app.chmod(0o755)
    return app


@pytest.fixture
def fake_sources(monkeypatch: pytest.MonkeyPatch, fake_source, launchable: Path):
    requested: dict[str, object] = {}
    items = [
        CandidateItem(display="Foo", identity="/bin/foo-missing"),
        CandidateItem(display="Bar Baz", identity=str(launchable)),
    ]

    def fake_build_sources(names):  # noqa: ANN001
        requested["names"] = names
        return [fake_source("fake", 0, items)]

    monkeypatch.setattr(main_module, "build_sources", fake_build_sources)
    return requested


def test_search_prints_ranked_matches(fake_sources) -> None:
    runner = CliRunner()
    result = runner.invoke(main_module.app, ["-s", "path", "search", "ba"])

    assert result.exit_code == 0
    assert "Bar Baz" in result.stdout
    assert "Foo" not in result.stdout
    assert [name.value for name in fake_sources["names"]] == ["path"]


def test_search_without_matches_fails(fake_sources) -> None:
    runner = CliRunner()
    result = runner.invoke(main_module.app, ["search", "zzz"])

    assert result.exit_code == 1
    assert "No matches" in result.stdout


def test_interactive_selection_records_usage_and_launches(
    fake_sources, tmp_path: Path, launchable: Path
) -> None:
    history_file = tmp_path / "history"
    runner = CliRunner()
    result = runner.invoke(
        main_module.app,
        ["--dry-run", "--history-file", str(history_file)],
        input="ba\n1\n",
    )

    assert result.exit_code == 0
    assert "Bar Baz" in result.stdout
    assert "Dry run:" in result.stdout
    assert UsageHistory(history_file).get_count(str(launchable)) == 1


def test_interactive_quit_launches_nothing(fake_sources, tmp_path: Path) -> None:
    history_file = tmp_path / "history"
    runner = CliRunner()
    result = runner.invoke(
        main_module.app,
        ["--dry-run", "--history-file", str(history_file)],
        input="zzz\nba\n7\n\nq\n",
    )

    assert result.exit_code == 0
    assert "No matches" in result.stdout
    assert "Invalid selection" in result.stdout
    assert "Dry run:" not in result.stdout
    assert not history_file.exists()


def test_interactive_end_of_input_exits_cleanly(fake_sources) -> None:
    runner = CliRunner()
    result = runner.invoke(main_module.app, ["--disable-history"], input="")

    assert result.exit_code == 0


def test_exec_launches_directly(
    fake_sources, tmp_path: Path, launchable: Path
) -> None:
    history_file = tmp_path / "history"
    runner = CliRunner()
    result = runner.invoke(
        main_module.app,
        ["--dry-run", "--history-file", str(history_file), "--exec", str(launchable)],
    )

    assert result.exit_code == 0
    assert "Dry run:" in result.stdout
    assert "names" not in fake_sources
    assert UsageHistory(history_file).get_count(str(launchable)) == 1


def test_exec_reports_missing_executable(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("PATH", str(tmp_path))
    history_file = tmp_path / "history"
    runner = CliRunner()
    result = runner.invoke(
        main_module.app,
        ["--dry-run", "--history-file", str(history_file), "--exec", "not-a-real-command"],
    )

    assert result.exit_code == 1
    assert "Executable not found" in result.stdout
    assert not history_file.exists()


def test_failed_launch_is_not_counted(tmp_path: Path) -> None:
    history_file = tmp_path / "history"
    UsageHistory(history_file).record_usage("missing-app")
    engine = RankingEngine.open(history_file)
    launcher = SystemdLauncher(dry_run=True)

    with pytest.raises(LaunchError):
        main_module.launch_item(
            engine,
            launcher,
            CandidateItem(display="Missing", identity="/nonexistent/missing-app"),
        )

    assert UsageHistory(history_file).counts() == {"missing-app": 1}


def test_invalid_config_is_reported(fake_sources, tmp_path: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(
        main_module.app,
        ["--config", str(tmp_path / "missing.toml"), "search", "ba"],
    )

    assert result.exit_code == 1
    assert "Config file not found" in result.stdout


def test_init_writes_default_config(tmp_path: Path) -> None:
    target = tmp_path / "conf" / "config.toml"
    runner = CliRunner()
    result = runner.invoke(main_module.app, ["init", "--path", str(target)])

    assert result.exit_code == 0
    assert "Default configuration file written" in result.stdout
    assert "[systemd_run]" in target.read_text()
