"""Pydantic schemas for the machine-readable report."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class ParseIssue(BaseModel):
    """Details about a line that was discarded with a diagnostic."""

    line_number: Optional[int] = Field(default=None, ge=1)
    reason: str
    raw_text: str = ""


class SampleRow(BaseModel):
    date_time: str
    counts_per_minute: int = Field(..., ge=0)


class DayCount(BaseModel):
    day: date
    high_count: int = Field(..., ge=1)


class TripReport(BaseModel):
    """Full record of one analysis run."""

    source: str
    margin: int = Field(..., ge=0)
    max_counts_per_minute: Optional[int] = None
    threshold: Optional[int] = None
    high_samples: List[SampleRow] = Field(default_factory=list)
    trip_date: Optional[date] = None
    trip_high_count: int = Field(default=0, ge=0)
    trip_samples: List[SampleRow] = Field(default_factory=list)
    day_counts: List[DayCount] = Field(default_factory=list)
    trip_span_start: Optional[date] = None
    trip_span_end: Optional[date] = None
    issues: List[ParseIssue] = Field(default_factory=list)
