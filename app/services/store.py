"""
Record store: the only module that reads or writes the `weights` table.

Functions flush or execute but never commit; the calling service owns the
transaction.
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from app.models.weight import WeightEntry

# Dialects with a native INSERT ... ON CONFLICT DO NOTHING.
_ON_CONFLICT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def find_entry(db: Session, subject: str, day: date) -> Optional[WeightEntry]:
    return (
        db.query(WeightEntry)
        .filter(WeightEntry.subject == subject, WeightEntry.day == day)
        .first()
    )


def insert_entry(db: Session, subject: str, weight: float, day: date) -> Optional[WeightEntry]:
    """
    Insert a new row and return it, or None if (subject, day) already exists.

    Uses the dialect's ON CONFLICT DO NOTHING where available. Elsewhere a
    plain INSERT is flushed and IntegrityError propagates to the caller.
    """
    dialect_insert = _ON_CONFLICT_INSERTS.get(db.get_bind().dialect.name)
    if dialect_insert is None:
        entry = WeightEntry(subject=subject, weight=weight, day=day)
        db.add(entry)
        db.flush()
        return entry

    table = WeightEntry.__table__
    stmt = (
        dialect_insert(table)
        .values({table.c.subject: subject, table.c.weight: weight, table.c.date: day})
        .on_conflict_do_nothing(index_elements=["subject", "date"])
        .returning(table.c.id)
    )
    new_id = db.execute(stmt).scalar_one_or_none()
    if new_id is None:
        return None
    return db.get(WeightEntry, new_id)


def update_weight(db: Session, entry: WeightEntry, weight: float) -> WeightEntry:
    entry.weight = weight
    db.flush()
    return entry


def delete_by_id(db: Session, entry_id: int) -> int:
    """Delete one row by id. Returns the number of rows removed (0 or 1)."""
    result = db.execute(delete(WeightEntry).where(WeightEntry.id == entry_id))
    return result.rowcount or 0


def list_entries(db: Session, predicate: ColumnElement[bool]) -> list[WeightEntry]:
    stmt = (
        select(WeightEntry)
        .where(predicate)
        .order_by(WeightEntry.day.asc(), WeightEntry.subject.asc(), WeightEntry.id.asc())
    )
    return list(db.scalars(stmt).all())


def list_subjects(db: Session) -> list[str]:
    """All distinct subjects in the store, ignoring any active filter."""
    stmt = select(WeightEntry.subject).distinct().order_by(WeightEntry.subject.asc())
    return list(db.scalars(stmt).all())
