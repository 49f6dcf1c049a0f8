"""
Entry service: upsert, delete and list weight entries.

Public API
----------
upsert_entry(db, subject, weight, day)  -> UpsertResult     (commits)
delete_entry(db, entry_id)              -> DeleteOutcome    (commits)
list_weights(db, criteria)              -> WeightListing    (read only)

Every storage failure is rolled back and re-raised as StorageError, so no
SQLAlchemy exception leaves this module.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import EntryConflictError, StorageError
from app.models.weight import WeightEntry
from app.services import store
from app.services.filters import EntryFilter, build_filter
from app.services.series import Projection, project
from app.services.validation import parse_entry_id, validate_entry

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

class UpsertOutcome(str, enum.Enum):
    created = "created"
    updated = "updated"


class DeleteOutcome(str, enum.Enum):
    deleted = "deleted"
    not_found = "not_found"

    @property
    def message(self) -> str:
        if self is DeleteOutcome.deleted:
            return "Entry deleted successfully."
        return "Entry not found or could not be deleted."


@dataclass
class UpsertResult:
    outcome: UpsertOutcome
    entry: WeightEntry

    @property
    def message(self) -> str:
        if self.outcome is UpsertOutcome.updated:
            return (
                f"Weight updated successfully for {self.entry.subject} "
                f"on {self.entry.day.isoformat()}."
            )
        return f"Weight added successfully for {self.entry.subject}."


@dataclass
class WeightListing:
    entries: list[WeightEntry]
    subjects: list[str]
    projection: Projection
    criteria: EntryFilter


# ---------------------------------------------------------------------------
# Public — upsert
# ---------------------------------------------------------------------------

def upsert_entry(db: Session, subject: Any, weight: Any, day: Any) -> UpsertResult:
    """
    Validate, then update the weight of the existing (subject, day) entry or
    insert a new one. Raises EntryValidationError before touching the store.
    """
    valid = validate_entry(subject, weight, day)

    try:
        existing = store.find_entry(db, valid.subject, valid.day)
        if existing is not None:
            store.update_weight(db, existing, valid.weight)
            db.commit()
            db.refresh(existing)
            logger.info(f"Updated weight for '{valid.subject}' on {valid.day}: {valid.weight}")
            return UpsertResult(outcome=UpsertOutcome.updated, entry=existing)

        entry = store.insert_entry(db, valid.subject, valid.weight, valid.day)
        if entry is None:
            # Lost the race: another writer inserted the same (subject, day)
            # between the lookup and the insert.
            db.rollback()
            logger.warning(f"Conflicting insert for '{valid.subject}' on {valid.day}")
            raise EntryConflictError(subject=valid.subject, day=valid.day)
        db.commit()
        db.refresh(entry)
    except StaleDataError:
        # The matched row was deleted before the weight update was flushed.
        db.rollback()
        logger.warning(f"Entry for '{valid.subject}' on {valid.day} vanished during update")
        raise EntryConflictError(subject=valid.subject, day=valid.day) from None
    except IntegrityError:
        db.rollback()
        logger.warning(f"Uniqueness violation for '{valid.subject}' on {valid.day}")
        raise EntryConflictError(subject=valid.subject, day=valid.day) from None
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Storage error upserting '{valid.subject}' on {valid.day}: {e}", exc_info=True)
        raise StorageError(action="upsert") from e

    logger.info(f"Created weight entry {entry.id} for '{valid.subject}' on {valid.day}")
    return UpsertResult(outcome=UpsertOutcome.created, entry=entry)


# ---------------------------------------------------------------------------
# Public — delete
# ---------------------------------------------------------------------------

def delete_entry(db: Session, entry_id: Any) -> DeleteOutcome:
    """Delete by id. A missing id is reported as not_found, not raised."""
    target = parse_entry_id(entry_id)

    try:
        removed = store.delete_by_id(db, target)
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Storage error deleting entry {target}: {e}", exc_info=True)
        raise StorageError(action="delete") from e

    if removed == 0:
        logger.info(f"Entry {target} not found for deletion")
        return DeleteOutcome.not_found
    logger.info(f"Deleted weight entry {target}")
    return DeleteOutcome.deleted


# ---------------------------------------------------------------------------
# Public — list
# ---------------------------------------------------------------------------

def list_weights(db: Session, criteria: EntryFilter | None = None) -> WeightListing:
    """Filtered rows (date ascending), every known subject, and chart series."""
    criteria = criteria or EntryFilter()
    try:
        entries = store.list_entries(db, build_filter(criteria))
        subjects = store.list_subjects(db)
    except SQLAlchemyError as e:
        logger.error(f"Storage error listing entries: {e}", exc_info=True)
        raise StorageError(action="list") from e

    return WeightListing(
        entries=entries,
        subjects=subjects,
        projection=project(entries),
        criteria=criteria,
    )
