"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional


@dataclass(frozen=True, slots=True)
class RadiationSample:
    """A single log entry; ``date_time_text`` is kept exactly as read."""

    date_time_text: str
    counts_per_minute: int


@dataclass(frozen=True, slots=True)
class TripSelection:
    """Winning date and its high readings. ``trip_date`` is None when nothing was grouped."""

    trip_date: Optional[date] = None
    high_count: int = 0
    samples: List[RadiationSample] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.trip_date is not None
