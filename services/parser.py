"""Turn raw log lines into radiation samples."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from models.records import RadiationSample
from models.schemas import ParseIssue

logger = logging.getLogger(__name__)

MIN_FIELDS = 3
MAX_COUNT = 2**31 - 1
_COUNT_PATTERN = re.compile(r"\+?[0-9]+")


@dataclass(frozen=True)
class LineResult:
    """Outcome of parsing one line: a sample, an issue, or neither for skipped lines."""

    sample: Optional[RadiationSample] = None
    issue: Optional[ParseIssue] = None


@dataclass
class ParsedLog:
    samples: List[RadiationSample] = field(default_factory=list)
    issues: List[ParseIssue] = field(default_factory=list)


def parse_count(value: str) -> int:
    candidate = value.strip()
    if not _COUNT_PATTERN.fullmatch(candidate):
        raise ValueError(f"Invalid counts-per-minute value: {value!r}")
    count = int(candidate)
    if count > MAX_COUNT:
        raise ValueError(f"Counts-per-minute value out of range: {value!r}")
    return count


def parse_line(line: str, line_number: int) -> LineResult:
    fields = line.split(",")
    # Header and metadata lines carry fewer fields and are not worth reporting.
    if len(fields) < MIN_FIELDS:
        return LineResult()

    date_time_text = fields[0]
    try:
        count = parse_count(fields[2])
    except ValueError:
        issue = ParseIssue(
            line_number=line_number,
            reason="invalid counts per minute",
            raw_text=fields[2],
        )
        logger.debug(
            "Discarding line with malformed count",
            extra={
                "line_number": line_number,
                "raw_text": issue.raw_text,
                "reason": issue.reason,
            },
        )
        return LineResult(issue=issue)

    return LineResult(
        sample=RadiationSample(date_time_text=date_time_text, counts_per_minute=count)
    )


def parse_lines(lines: Iterable[str]) -> ParsedLog:
    """Parse every line, keeping samples in file order and collecting discards."""

    parsed = ParsedLog()
    for line_number, line in enumerate(lines, start=1):
        result = parse_line(line, line_number)
        if result.sample is not None:
            parsed.samples.append(result.sample)
        elif result.issue is not None:
            parsed.issues.append(result.issue)
    return parsed
