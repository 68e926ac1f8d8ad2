from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

import typer

from models.records import RadiationSample, TripSelection
from settings import DEFAULT_TABLE_WIDTH

DATE_COLUMN_WIDTH = 20
COUNT_COLUMN_WIDTH = 3

HIGH_READINGS_TITLE = "Radiation samples with CPM >= (max - {margin})"
TRIP_DAY_TITLE = "Samples that day"


def format_table(
    title: str, samples: Iterable[RadiationSample], width: int = DEFAULT_TABLE_WIDTH
) -> List[str]:
    """Bordered table; the title is left-biased when it cannot be centered exactly."""
    rule = "-" * width
    padding = max((width - len(title)) // 2, 0)
    lines = [rule, " " * padding + title, rule]
    for sample in samples:
        lines.append(
            f"| {sample.date_time_text:<{DATE_COLUMN_WIDTH}} "
            f"| {sample.counts_per_minute:>{COUNT_COLUMN_WIDTH}} |"
        )
    lines.append(rule)
    return lines


def format_date(value: Optional[date]) -> str:
    return value.isoformat() if value is not None else "none"


def format_summary(selection: TripSelection) -> str:
    return (
        f"Most Likely Camping trip date: {format_date(selection.trip_date)}, "
        f"number of high counts that day : {selection.high_count}"
    )


def render_table(
    title: str, samples: Iterable[RadiationSample], width: int = DEFAULT_TABLE_WIDTH
) -> None:
    for line in format_table(title, samples, width):
        typer.echo(line)


def render_analysis(
    high_samples: Sequence[RadiationSample],
    selection: TripSelection,
    margin: int,
    width: int = DEFAULT_TABLE_WIDTH,
) -> None:
    render_table(HIGH_READINGS_TITLE.format(margin=margin), high_samples, width)
    typer.echo(format_summary(selection))
    render_table(TRIP_DAY_TITLE, selection.samples, width)


def render_days(
    day_counts: Sequence[Tuple[date, int]],
    selection: TripSelection,
    span: Optional[Tuple[date, date]],
) -> None:
    typer.secho("High readings per day", bold=True)
    if day_counts:
        for day, count in day_counts:
            marker = " *" if day == selection.trip_date else ""
            typer.echo(f"  - {day.isoformat()}: {count}{marker}")
    else:
        typer.echo("No dated high readings.")

    typer.echo()
    typer.secho("Estimated trip", bold=True)
    typer.echo(format_summary(selection))
    if span is None:
        typer.echo("trip span: none")
    else:
        start, end = span
        days = (end - start).days + 1
        typer.echo(
            f"trip span: {start.isoformat()} to {end.isoformat()} ({days} days)"
        )
