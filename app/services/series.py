"""
Series projector: pivots flat (subject, day, weight) rows into chart data.

Public API
----------
project(rows) -> Projection

Every series is aligned to one shared, sorted date axis. A subject with no
reading on an axis date gets GAP at that position, never 0.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Optional, Protocol

# "No reading on this date". Serialises to JSON null.
GAP = None


class WeightRow(Protocol):
    subject: str
    weight: float
    day: date


@dataclass
class Series:
    subject: str
    points: list[Optional[float]] = field(default_factory=list)


@dataclass
class Projection:
    date_axis: list[date] = field(default_factory=list)
    series: list[Series] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.date_axis


def project(rows: Iterable[WeightRow]) -> Projection:
    # dicts keep insertion order, so subjects stay in first-seen order
    by_subject: dict[str, dict[date, float]] = {}
    days: set[date] = set()

    for row in rows:
        by_subject.setdefault(row.subject, {})[row.day] = row.weight  # last write wins
        days.add(row.day)

    date_axis = sorted(days)
    series = [
        Series(subject=subject, points=[readings.get(d, GAP) for d in date_axis])
        for subject, readings in by_subject.items()
    ]
    return Projection(date_axis=date_axis, series=series)
