"""Aggregation logic for radiation samples."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

from models.records import RadiationSample, TripSelection

logger = logging.getLogger(__name__)

# M/d/yyyy H:mm with a 24-hour clock.
_DATE_TIME_PATTERN = re.compile(
    r"([0-9]{1,2})/([0-9]{1,2})/([0-9]{4}) ([0-9]{1,2}):([0-9]{2})"
)

DateGroups = Dict[date, List[RadiationSample]]


def parse_date_time(value: str) -> datetime:
    match = _DATE_TIME_PATTERN.fullmatch(value)
    if match is None:
        raise ValueError(f"Timestamp {value!r} does not match M/d/yyyy H:mm")
    month, day, year, hour, minute = (int(part) for part in match.groups())
    try:
        return datetime(year, month, day, hour, minute)
    except ValueError as exc:
        raise ValueError(f"Timestamp {value!r} is not a valid date/time") from exc


@dataclass
class GroupingResult:
    groups: DateGroups = field(default_factory=dict)
    malformed: List[RadiationSample] = field(default_factory=list)


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def max_counts(self, samples: Iterable[RadiationSample]) -> Optional[int]:
        return max((sample.counts_per_minute for sample in samples), default=None)

    def filter_near_max(
        self,
        samples: List[RadiationSample],
        margin: int,
        maximum: Optional[int] = None,
    ) -> List[RadiationSample]:
        """Keep samples with ``count >= maximum - margin`` in their original order."""
        if maximum is None:
            maximum = self.max_counts(samples)
        if maximum is None:
            return []
        threshold = maximum - margin
        return [sample for sample in samples if sample.counts_per_minute >= threshold]

    def group_by_date(self, samples: Iterable[RadiationSample]) -> GroupingResult:
        result = GroupingResult()
        for sample in samples:
            try:
                moment = parse_date_time(sample.date_time_text)
            except ValueError:
                logger.warning(
                    "Skipping malformed date: %s",
                    sample.date_time_text,
                    extra={"raw_text": sample.date_time_text},
                )
                result.malformed.append(sample)
                continue
            result.groups.setdefault(moment.date(), []).append(sample)
        return result

    def select_trip(self, groups: DateGroups) -> TripSelection:
        """Pick the date with the most samples; the earliest date wins a tie."""
        if not groups:
            return TripSelection()
        trip_date = max(sorted(groups), key=lambda day: len(groups[day]))
        samples = list(groups[trip_date])
        return TripSelection(trip_date=trip_date, high_count=len(samples), samples=samples)

    def day_counts(self, groups: DateGroups) -> List[Tuple[date, int]]:
        return [(day, len(groups[day])) for day in sorted(groups) if groups[day]]

    def trip_span(
        self, groups: DateGroups, selection: TripSelection
    ) -> Optional[Tuple[date, date]]:
        """Consecutive days with high readings around the selected date."""
        if selection.trip_date is None:
            return None
        one_day = timedelta(days=1)
        start = end = selection.trip_date
        while groups.get(start - one_day):
            start -= one_day
        while groups.get(end + one_day):
            end += one_day
        return start, end
