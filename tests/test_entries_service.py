"""
Tests for the entry service: upsert decision, validation, deletion and the
conflict / storage error paths (no HTTP layer).
"""
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

from app.core.errors import (
    FIELDS_MESSAGE,
    WEIGHT_MESSAGE,
    EntryConflictError,
    EntryValidationError,
    StorageError,
)
from app.models.weight import WeightEntry
from app.services import entries as entries_service
from app.services import store
from app.services.entries import (
    DeleteOutcome,
    UpsertOutcome,
    delete_entry,
    list_weights,
    upsert_entry,
)
from app.services.filters import EntryFilter
from app.services.validation import DATE_MESSAGE


def _count(db) -> int:
    return db.query(WeightEntry).count()


# ---------------------------------------------------------------------------
# Upsert
# ---------------------------------------------------------------------------

class TestUpsert:
    def test_creates_new_entry(self, db):
        result = upsert_entry(db, "Tom", 4.5, "2024-01-01")
        assert result.outcome is UpsertOutcome.created
        assert result.entry.id > 0
        assert result.entry.day == date(2024, 1, 1)
        assert result.message == "Weight added successfully for Tom."

    def test_resubmission_updates_weight(self, db):
        first = upsert_entry(db, "Tom", 4.5, "2024-01-01")
        second = upsert_entry(db, "Tom", 4.8, "2024-01-01")
        assert second.outcome is UpsertOutcome.updated
        assert second.entry.id == first.entry.id
        assert second.message == "Weight updated successfully for Tom on 2024-01-01."
        rows = db.query(WeightEntry).all()
        assert len(rows) == 1
        assert rows[0].weight == 4.8

    def test_same_date_different_cats_are_separate(self, db):
        upsert_entry(db, "Tom", 4.5, "2024-01-01")
        upsert_entry(db, "Luna", 3.9, "2024-01-01")
        assert _count(db) == 2

    def test_uniqueness_holds_for_any_sequence(self, db):
        submissions = [
            ("Tom", 4.5, "2024-01-01"),
            ("Tom", 4.6, "2024-01-02"),
            ("Luna", 3.9, "2024-01-01"),
            ("Tom", 4.7, "2024-01-01"),
            ("Luna", 4.0, "2024-01-01"),
            ("Tom", 4.4, "2024-01-02"),
        ]
        for subject, weight, day in submissions:
            upsert_entry(db, subject, weight, day)
        keys = [(r.subject, r.day) for r in db.query(WeightEntry).all()]
        assert len(keys) == len(set(keys)) == 3

    def test_subject_is_trimmed(self, db):
        upsert_entry(db, "  Tom  ", 4.5, "2024-01-01")
        result = upsert_entry(db, "Tom", 4.6, "2024-01-01")
        assert result.outcome is UpsertOutcome.updated
        assert result.entry.subject == "Tom"

    def test_accepts_numeric_strings_and_date_values(self, db):
        result = upsert_entry(db, "Tom", "4.25", date(2024, 5, 6))
        assert result.entry.weight == 4.25
        assert result.entry.day == date(2024, 5, 6)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class TestUpsertValidation:
    @pytest.mark.parametrize(
        "subject, weight, day, field, message",
        [
            ("", 5.0, "2024-01-01", "subject", FIELDS_MESSAGE),
            ("   ", 5.0, "2024-01-01", "subject", FIELDS_MESSAGE),
            (None, 5.0, "2024-01-01", "subject", FIELDS_MESSAGE),
            ("Tom", -1, "2024-01-01", "weight", WEIGHT_MESSAGE),
            ("Tom", 0, "2024-01-01", "weight", WEIGHT_MESSAGE),
            ("Tom", "heavy", "2024-01-01", "weight", WEIGHT_MESSAGE),
            ("Tom", float("nan"), "2024-01-01", "weight", WEIGHT_MESSAGE),
            ("Tom", float("inf"), "2024-01-01", "weight", WEIGHT_MESSAGE),
            ("Tom", True, "2024-01-01", "weight", WEIGHT_MESSAGE),
            ("Tom", "", "2024-01-01", "weight", FIELDS_MESSAGE),
            ("Tom", 5.0, "", "date", FIELDS_MESSAGE),
            ("Tom", 5.0, None, "date", FIELDS_MESSAGE),
            ("Tom", 5.0, "2024-02-30", "date", DATE_MESSAGE),
            ("Tom", 5.0, "2024-1-5", "date", DATE_MESSAGE),
            ("Tom", 5.0, "yesterday", "date", DATE_MESSAGE),
        ],
    )
    def test_rejected_without_mutation(self, db, subject, weight, day, field, message):
        upsert_entry(db, "Existing", 4.0, "2024-01-01")
        with pytest.raises(EntryValidationError) as exc:
            upsert_entry(db, subject, weight, day)
        assert exc.value.field == field
        assert exc.value.message == message
        assert exc.value.http_status == 422
        assert _count(db) == 1

    def test_first_violation_wins(self, db):
        with pytest.raises(EntryValidationError) as exc:
            upsert_entry(db, "", -1, "")
        assert exc.value.field == "subject"


# ---------------------------------------------------------------------------
# Conflict & storage failures
# ---------------------------------------------------------------------------

class TestUpsertConflict:
    def test_lost_race_on_conflict_insert_raises_conflict(self, db, monkeypatch):
        upsert_entry(db, "Tom", 4.5, "2024-01-01")
        # Pretend the pre-check ran before the other writer committed.
        monkeypatch.setattr(store, "find_entry", lambda *args, **kwargs: None)
        with pytest.raises(EntryConflictError) as exc:
            upsert_entry(db, "Tom", 4.9, "2024-01-01")
        assert exc.value.http_status == 409
        assert "Please update it instead." in exc.value.message
        assert exc.value.details == {"subject": "Tom", "date": "2024-01-01"}
        rows = db.query(WeightEntry).all()
        assert len(rows) == 1
        assert rows[0].weight == 4.5

    def test_integrity_error_without_native_upsert_raises_conflict(self, db, monkeypatch):
        upsert_entry(db, "Tom", 4.5, "2024-01-01")
        monkeypatch.setattr(store, "find_entry", lambda *args, **kwargs: None)
        monkeypatch.setattr(store, "_ON_CONFLICT_INSERTS", {})
        with pytest.raises(EntryConflictError):
            upsert_entry(db, "Tom", 4.9, "2024-01-01")
        assert _count(db) == 1

    def test_row_deleted_before_update_raises_conflict(self, db, monkeypatch):
        upsert_entry(db, "Tom", 4.5, "2024-01-01")

        def vanished(*args, **kwargs):
            raise StaleDataError("UPDATE statement on table 'weights' expected to update 1 row(s); 0 were matched.")

        monkeypatch.setattr(store, "update_weight", vanished)
        with pytest.raises(EntryConflictError) as exc:
            upsert_entry(db, "Tom", 4.9, "2024-01-01")
        assert exc.value.http_status == 409
        assert db.query(WeightEntry).one().weight == 4.5

    def test_plain_insert_path_creates(self, db, monkeypatch):
        monkeypatch.setattr(store, "_ON_CONFLICT_INSERTS", {})
        result = upsert_entry(db, "Tom", 4.5, "2024-01-01")
        assert result.outcome is UpsertOutcome.created
        assert _count(db) == 1

    def test_storage_failure_raises_storage_error(self, db, monkeypatch):
        def boom(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("database is locked"))

        monkeypatch.setattr(store, "find_entry", boom)
        with pytest.raises(StorageError) as exc:
            upsert_entry(db, "Tom", 4.5, "2024-01-01")
        assert exc.value.http_status == 503
        assert "locked" not in exc.value.message


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

class TestDelete:
    def test_missing_id_on_empty_store_is_not_found(self, db):
        assert delete_entry(db, 99999) is DeleteOutcome.not_found

    def test_delete_then_delete_again(self, db):
        entry_id = upsert_entry(db, "Tom", 4.5, "2024-01-01").entry.id
        assert delete_entry(db, entry_id) is DeleteOutcome.deleted
        assert delete_entry(db, entry_id) is DeleteOutcome.not_found
        assert _count(db) == 0

    def test_only_target_row_removed(self, db):
        keep = upsert_entry(db, "Luna", 3.9, "2024-01-01").entry.id
        drop = upsert_entry(db, "Tom", 4.5, "2024-01-01").entry.id
        delete_entry(db, drop)
        assert [r.id for r in db.query(WeightEntry).all()] == [keep]

    def test_integral_string_id_accepted(self, db):
        entry_id = upsert_entry(db, "Tom", 4.5, "2024-01-01").entry.id
        assert delete_entry(db, str(entry_id)) is DeleteOutcome.deleted

    @pytest.mark.parametrize("bad_id", [0, -3, "abc", "", None, True, 1.5, "²", "1e3"])
    def test_invalid_id_rejected(self, db, bad_id):
        with pytest.raises(EntryValidationError) as exc:
            delete_entry(db, bad_id)
        assert exc.value.message == "Invalid entry ID for deletion."

    def test_outcome_messages(self):
        assert DeleteOutcome.deleted.message == "Entry deleted successfully."
        assert DeleteOutcome.not_found.message == "Entry not found or could not be deleted."


# ---------------------------------------------------------------------------
# List
# ---------------------------------------------------------------------------

class TestListWeights:
    def test_listing_combines_rows_subjects_and_projection(self, db):
        upsert_entry(db, "A", 4.0, "2024-01-01")
        upsert_entry(db, "B", 5.0, "2024-01-02")
        listing = list_weights(db, EntryFilter(subject="A"))
        assert [e.subject for e in listing.entries] == ["A"]
        # Subject list ignores the active filter.
        assert listing.subjects == ["A", "B"]
        assert listing.projection.date_axis == [date(2024, 1, 1)]

    def test_empty_store(self, db):
        listing = list_weights(db)
        assert listing.entries == []
        assert listing.subjects == []
        assert listing.projection.is_empty

    def test_storage_failure_raises_storage_error(self, db, monkeypatch):
        def boom(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("no such table"))

        monkeypatch.setattr(entries_service.store, "list_entries", boom)
        with pytest.raises(StorageError):
            list_weights(db)
