from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import typer

from cli.render import render_analysis, render_days
from logging_config import configure_logging
from services.processor import TripAnalyzer, build_default_analyzer
from settings import Settings, get_settings, is_known_log_level


@dataclass
class CLIState:
    settings: Settings


app = typer.Typer(
    help="Find the most likely camping trip date in a radiation-count log.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


def _build_analyzer(state: CLIState, margin: Optional[int]) -> TripAnalyzer:
    return build_default_analyzer(state.settings.margin if margin is None else margin)


def _resolve_path(state: CLIState, path: Optional[Path]) -> Path:
    return path if path is not None else Path(state.settings.log_path)


@app.callback()
def main(
    ctx: typer.Context,
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Diagnostic verbosity on stderr (defaults to LOG_LEVEL env or WARNING).",
    ),
) -> None:
    """Entry point for the CLI."""
    if log_level is not None and not is_known_log_level(log_level):
        raise typer.BadParameter(f"Unknown log level {log_level!r}.", param_hint="--log-level")
    settings = get_settings()
    configure_logging(log_level.upper() if log_level else settings.log_level)
    ctx.obj = CLIState(settings=settings)


@app.command("analyze")
def analyze_command(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(
        None, help="Radiation log (defaults to CAMPTRIP_LOG_PATH or 7_14_2019.txt)."
    ),
    margin: Optional[int] = typer.Option(
        None, "--margin", "-m", min=0, help="Counts below the maximum that still count as high."
    ),
    width: Optional[int] = typer.Option(
        None, "--width", "-w", min=1, help="Width of the table borders."
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the full report as JSON."),
) -> None:
    """Print the high-readings table, the trip date and that day's readings."""
    state = _get_state(ctx)
    analyzer = _build_analyzer(state, margin)
    analysis = analyzer.analyze(_resolve_path(state, path))

    if as_json:
        typer.echo(analysis.to_report().model_dump_json(indent=2))
        return

    render_analysis(
        analysis.high_samples,
        analysis.selection,
        margin=analyzer.margin,
        width=state.settings.table_width if width is None else width,
    )


@app.command("days")
def days_command(
    ctx: typer.Context,
    path: Optional[Path] = typer.Argument(
        None, help="Radiation log (defaults to CAMPTRIP_LOG_PATH or 7_14_2019.txt)."
    ),
    margin: Optional[int] = typer.Option(
        None, "--margin", "-m", min=0, help="Counts below the maximum that still count as high."
    ),
) -> None:
    """Show high readings per day and the consecutive days around the trip date."""
    state = _get_state(ctx)
    analysis = _build_analyzer(state, margin).analyze(_resolve_path(state, path))
    render_days(analysis.day_counts, analysis.selection, analysis.span)
