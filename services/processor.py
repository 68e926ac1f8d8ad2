"""Run orchestration for one radiation log."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Tuple

from models.records import RadiationSample, TripSelection
from models.schemas import DayCount, ParseIssue, SampleRow, TripReport
from services.aggregator import Aggregator, DateGroups
from services.parser import parse_lines
from settings import get_settings
from storage.log_source import LogSource

logger = logging.getLogger(__name__)


@dataclass
class TripAnalysis:
    """Everything one run produces, stage by stage."""

    source: str
    margin: int
    samples: List[RadiationSample] = field(default_factory=list)
    max_counts: Optional[int] = None
    high_samples: List[RadiationSample] = field(default_factory=list)
    groups: DateGroups = field(default_factory=dict)
    selection: TripSelection = field(default_factory=TripSelection)
    day_counts: List[Tuple[date, int]] = field(default_factory=list)
    span: Optional[Tuple[date, date]] = None
    issues: List[ParseIssue] = field(default_factory=list)

    @property
    def threshold(self) -> Optional[int]:
        if self.max_counts is None:
            return None
        return self.max_counts - self.margin

    def to_report(self) -> TripReport:
        return TripReport(
            source=self.source,
            margin=self.margin,
            max_counts_per_minute=self.max_counts,
            threshold=self.threshold,
            high_samples=[_row(sample) for sample in self.high_samples],
            trip_date=self.selection.trip_date,
            trip_high_count=self.selection.high_count,
            trip_samples=[_row(sample) for sample in self.selection.samples],
            day_counts=[DayCount(day=day, high_count=count) for day, count in self.day_counts],
            trip_span_start=self.span[0] if self.span else None,
            trip_span_end=self.span[1] if self.span else None,
            issues=list(self.issues),
        )


def _row(sample: RadiationSample) -> SampleRow:
    return SampleRow(date_time=sample.date_time_text, counts_per_minute=sample.counts_per_minute)


class TripAnalyzer:
    """Coordinates reading, filtering, grouping and selection for a log file."""

    def __init__(self, aggregator: Aggregator, margin: int = 5) -> None:
        if margin < 0:
            raise ValueError("Margin must be zero or greater.")
        self.aggregator = aggregator
        self.margin = margin

    def read_lines(self, path: Path) -> Tuple[List[str], List[ParseIssue]]:
        """Return the file's lines, or no lines plus an issue when it cannot be read."""
        try:
            return LogSource(path).read_lines(), []
        except OSError as exc:
            logger.error("Error reading file: %s", exc, extra={"source": str(path)})
            return [], [ParseIssue(reason=f"unreadable file: {exc}", raw_text=str(path))]

    def analyze_lines(self, lines: List[str], source: str = "<lines>") -> TripAnalysis:
        parsed = parse_lines(lines)
        analysis = TripAnalysis(
            source=source,
            margin=self.margin,
            samples=parsed.samples,
            issues=list(parsed.issues),
        )
        analysis.max_counts = self.aggregator.max_counts(parsed.samples)
        analysis.high_samples = self.aggregator.filter_near_max(
            parsed.samples, self.margin, maximum=analysis.max_counts
        )

        grouping = self.aggregator.group_by_date(analysis.high_samples)
        analysis.groups = grouping.groups
        analysis.issues.extend(
            ParseIssue(reason="malformed date", raw_text=sample.date_time_text)
            for sample in grouping.malformed
        )

        analysis.selection = self.aggregator.select_trip(grouping.groups)
        analysis.day_counts = self.aggregator.day_counts(grouping.groups)
        analysis.span = self.aggregator.trip_span(grouping.groups, analysis.selection)

        logger.info(
            "Analyzed radiation log",
            extra={
                "source": source,
                "sample_count": len(parsed.samples),
                "margin": self.margin,
                "threshold": analysis.threshold,
                "trip_date": analysis.selection.trip_date,
            },
        )
        return analysis

    def analyze(self, path: Path) -> TripAnalysis:
        lines, read_issues = self.read_lines(path)
        analysis = self.analyze_lines(lines, source=str(path))
        analysis.issues[:0] = read_issues
        return analysis


@lru_cache
def build_default_analyzer(margin: Optional[int] = None) -> TripAnalyzer:
    """Factory that wires the analyzer with configured defaults."""
    settings = get_settings()
    return TripAnalyzer(
        aggregator=Aggregator(),
        margin=settings.margin if margin is None else margin,
    )
