"""
Filter query builder.

Turns optional listing criteria into one conjunctive SQLAlchemy predicate
over `WeightEntry`. It never runs a query; the store consumes the result.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Optional

from sqlalchemy import and_, true
from sqlalchemy.sql.elements import ColumnElement

from app.models.weight import WeightEntry
from app.services.validation import parse_optional_day


@dataclass(frozen=True)
class EntryFilter:
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    subject: Optional[str] = None

    @classmethod
    def from_params(
        cls,
        start_date: Any = None,
        end_date: Any = None,
        subject: Optional[str] = None,
    ) -> "EntryFilter":
        """Build criteria from raw query values; blanks mean "not provided"."""
        name = subject.strip() if isinstance(subject, str) else None
        return cls(
            start_date=parse_optional_day(start_date, field="start_date"),
            end_date=parse_optional_day(end_date, field="end_date"),
            subject=name or None,
        )

    @property
    def is_empty(self) -> bool:
        return self.start_date is None and self.end_date is None and self.subject is None

    def to_dict(self) -> dict:
        return {
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "subject": self.subject,
        }


def build_filter(criteria: EntryFilter) -> ColumnElement[bool]:
    clauses: list[ColumnElement[bool]] = []
    if criteria.start_date is not None:
        clauses.append(WeightEntry.day >= criteria.start_date)
    if criteria.end_date is not None:
        clauses.append(WeightEntry.day <= criteria.end_date)
    if criteria.subject is not None:
        clauses.append(WeightEntry.subject == criteria.subject)
    if not clauses:
        return true()
    return and_(*clauses)
