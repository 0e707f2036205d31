import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Annotated

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from typer import Argument, Context, Exit, Option, Typer

from .config import (
    Config,
    UIConfig,
    load_config,
    resolve_history_path,
    write_default_config,
)
from .errors import FuzzydError
from .launcher import SystemdLauncher
from .matching import RankingEngine
from .models import CandidateItem, ScoredMatch
from .sources import SourceName, build_sources, populate

app = Typer(
    help="A fuzzy finder for launching applications and executables.",
    no_args_is_help=False,
)

logger = logging.getLogger(__name__)


@dataclass
class CliOptions:
    sources: list[SourceName] = field(default_factory=list)
    debug: bool = False
    config_path: Path | None = None
    disable_history: bool = False
    history_file: Path | None = None
    dry_run: bool = False


def configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_settings(options: CliOptions) -> Config:
    config = load_config(options.config_path)
    if config.debug and not options.debug:
        configure_logging(True)
    return config


def open_engine(options: CliOptions, config: Config, *, with_sources: bool = True) -> RankingEngine:
    history_path = resolve_history_path(
        options.history_file, config, disabled=options.disable_history
    )
    logger.debug("Using history file %s", history_path)
    engine = RankingEngine.open(history_path)
    if with_sources:
        populate(engine, build_sources(options.sources))
        logger.debug("Total items added to finder: %d", engine.item_count())
    return engine


def render_matches(matches: list[ScoredMatch], *, highlight: str = "green") -> Table:
    table = Table(show_header=True, header_style="bold", expand=False)
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Description", overflow="ellipsis")
    table.add_column("Score", justify="right")
    for number, match in enumerate(matches, start=1):
        table.add_row(
            str(number),
            escape(match.display),
            escape(match.item.description),
            f"{match.score:.1f}",
            style=highlight if number == 1 else None,
        )
    return table


def run_interactive(
    engine: RankingEngine, ui: UIConfig, console: Console
) -> CandidateItem | None:
    """Prompt for queries until the user picks a match or quits."""
    while True:
        try:
            query = console.input(f"[bold]{escape(ui.prompt)}[/] ")
        except (EOFError, KeyboardInterrupt):
            return None

        matches = engine.rank(query.strip(), limit=ui.limit)
        if not matches:
            console.print("[bold red]No matches[/]")
            continue
        console.print(render_matches(matches, highlight=ui.highlight_color))

        try:
            choice = console.input(
                "[bold cyan]Select #[/] (enter to search again, q to quit): "
            ).strip()
        except (EOFError, KeyboardInterrupt):
            return None
        if not choice:
            continue
        if choice.lower() == "q":
            return None
        if choice.isdigit() and 1 <= int(choice) <= len(matches):
            return matches[int(choice) - 1].item
        console.print(f"[bold red]Invalid selection:[/] {escape(choice)}")


def launch_item(
    engine: RankingEngine, launcher: SystemdLauncher, item: CandidateItem
) -> None:
    logger.debug("Launching: %s", item.identity)
    launcher.launch(item)
    engine.record_usage(item.identity)


@app.callback(invoke_without_command=True)
def main(
    ctx: Context,
    source: Annotated[
        list[SourceName] | None,
        Option(
            "--source",
            "-s",
            help="Source to search for executables; repeat for several. Defaults to all sources.",
        ),
    ] = None,
    debug: Annotated[
        bool, Option("--debug", "-d", help="Log load timings and launch details.")
    ] = False,
    config: Annotated[
        Path | None,
        Option(
            "--config",
            "-c",
            help="Custom TOML configuration file (default: ~/.config/fuzzyd/config.toml).",
        ),
    ] = None,
    exec_command: Annotated[
        str | None,
        Option(
            "--exec",
            "-e",
            help="Launch a command directly without entering the interactive mode.",
        ),
    ] = None,
    disable_history: Annotated[
        bool, Option("--disable-history", help="Do not use launch history for ranking.")
    ] = False,
    history_file: Annotated[
        Path | None,
        Option(
            "--history-file",
            help="Custom history file (default: ~/.local/share/fuzzyd/fuzzyd.history).",
        ),
    ] = None,
    dry_run: Annotated[
        bool, Option("--dry-run", help="Print the launch command instead of running it.")
    ] = False,
) -> None:
    configure_logging(debug)
    options = CliOptions(
        sources=list(source or []),
        debug=debug,
        config_path=config,
        disable_history=disable_history,
        history_file=history_file,
        dry_run=dry_run,
    )
    ctx.obj = options
    if ctx.invoked_subcommand is not None:
        return

    console = Console()
    try:
        settings = load_settings(options)
        launcher = SystemdLauncher(
            settings.systemd_run.parameters, dry_run=dry_run, console=console
        )
        if exec_command is not None:
            engine = open_engine(options, settings, with_sources=False)
            item = CandidateItem(display=exec_command, identity=exec_command, priority=0)
            launch_item(engine, launcher, item)
            return

        engine = open_engine(options, settings)
        selected = run_interactive(engine, settings.ui, console)
        if selected is None:
            logger.debug("Exiting fuzzyd. Goodbye!")
            return
        launch_item(engine, launcher, selected)
    except FuzzydError as exc:
        console.print(f"[bold red]Error:[/] {escape(str(exc))}")
        raise Exit(code=1) from exc


@app.command()
def search(
    ctx: Context,
    query: Annotated[str, Argument(help="Query to rank candidates against.")] = "",
    limit: Annotated[
        int | None, Option("--limit", "-n", min=1, help="Maximum number of rows.")
    ] = None,
) -> None:
    """Print ranked matches for QUERY without launching anything."""
    options: CliOptions = ctx.obj or CliOptions()
    console = Console()
    try:
        settings = load_settings(options)
        engine = open_engine(options, settings)
        matches = engine.rank(query, limit=limit or settings.ui.limit)
    except FuzzydError as exc:
        console.print(f"[bold red]Error:[/] {escape(str(exc))}")
        raise Exit(code=1) from exc

    if not matches:
        console.print("[bold red]No matches[/]")
        raise Exit(code=1)
    console.print(render_matches(matches, highlight=settings.ui.highlight_color))


@app.command()
def init(
    path: Annotated[
        Path | None, Option("--path", help="Where to write the configuration file.")
    ] = None,
) -> None:
    """Write the default configuration file."""
    console = Console()
    try:
        written = write_default_config(path)
    except OSError as exc:
        console.print(f"[bold red]Could not write configuration:[/] {escape(str(exc))}")
        raise Exit(code=1) from exc
    console.print(f"Default configuration file written to [bold]{escape(str(written))}[/]")
