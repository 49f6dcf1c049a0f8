"""
Entries router.

POST   /entries        — add or update a weight reading
DELETE /entries/{id}   — delete a reading by id
GET    /entries        — filtered table, subject list and chart data
"""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.db.base import get_db
from app.models.weight import WeightEntry
from app.schemas.common import ErrorResponse
from app.schemas.entries import (
    ChartData,
    ChartDataset,
    DeleteStatusResponse,
    EntryListResponse,
    EntryOut,
    EntryRequest,
    EntryStatusResponse,
    FiltersOut,
)
from app.services.entries import (
    DeleteOutcome,
    UpsertOutcome,
    delete_entry,
    list_weights,
    upsert_entry,
)
from app.services.filters import EntryFilter
from app.services.series import Projection

router = APIRouter(prefix="/entries", tags=["entries"])

# Line colours, assigned by series position and cycled.
PALETTE = ["#4CAF50", "#2196F3", "#FFC107", "#E91E63", "#9C27B0", "#00BCD4", "#FF5722", "#673AB7"]


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _entry_out(e: WeightEntry) -> EntryOut:
    return EntryOut(id=e.id, subject=e.subject, weight=e.weight, date=e.day.isoformat())


def _chart(projection: Projection) -> ChartData:
    return ChartData(
        labels=[d.isoformat() for d in projection.date_axis],
        datasets=[
            ChartDataset(
                label=f"{s.subject} Weight (kg)",
                subject=s.subject,
                data=s.points,
                borderColor=PALETTE[i % len(PALETTE)],
            )
            for i, s in enumerate(projection.series)
        ],
    )


# ---------------------------------------------------------------------------
# POST /entries
# ---------------------------------------------------------------------------

@router.post(
    "",
    response_model=EntryStatusResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add or update a weight entry",
    responses={
        200: {"description": "An entry for this cat and date existed; its weight was updated."},
        201: {"description": "A new entry was created."},
        409: {"model": ErrorResponse, "description": "A concurrent request created the same entry first."},
        422: {"model": ErrorResponse, "description": "Missing field, non-positive weight or invalid date."},
        503: {"model": ErrorResponse, "description": "The store is unavailable."},
    },
)
def submit_entry(payload: EntryRequest, response: Response, db: Session = Depends(get_db)):
    """
    Upsert keyed by (subject, date):
    - no entry yet → insert, **201**;
    - entry exists → overwrite its weight, **200**.
    """
    result = upsert_entry(db, subject=payload.subject, weight=payload.weight, day=payload.date)
    if result.outcome is UpsertOutcome.updated:
        response.status_code = status.HTTP_200_OK
    return EntryStatusResponse(
        outcome=result.outcome.value,
        message=result.message,
        entry=_entry_out(result.entry),
    )


# ---------------------------------------------------------------------------
# DELETE /entries/{entry_id}
# ---------------------------------------------------------------------------

@router.delete(
    "/{entry_id}",
    response_model=DeleteStatusResponse,
    summary="Delete a weight entry",
    responses={
        200: {"description": "Entry deleted."},
        404: {"description": "No entry with this id (already gone)."},
        422: {"model": ErrorResponse, "description": "Id is not a positive integer."},
    },
)
def remove_entry(entry_id: int, response: Response, db: Session = Depends(get_db)):
    """Delete by id. A missing id returns **404** with `outcome=not_found`."""
    outcome = delete_entry(db, entry_id)
    if outcome is DeleteOutcome.not_found:
        response.status_code = status.HTTP_404_NOT_FOUND
    return DeleteStatusResponse(
        status="success" if outcome is DeleteOutcome.deleted else "info",
        outcome=outcome.value,
        message=outcome.message,
        id=entry_id,
    )


# ---------------------------------------------------------------------------
# GET /entries
# ---------------------------------------------------------------------------

@router.get(
    "",
    response_model=EntryListResponse,
    summary="List entries with chart data",
    responses={
        422: {"model": ErrorResponse, "description": "A date filter is not YYYY-MM-DD."},
        503: {"model": ErrorResponse, "description": "The store is unavailable."},
    },
)
def list_entries(
    start_date: Optional[str] = Query(
        default=None,
        description="Inclusive lower bound (YYYY-MM-DD). Blank means no bound.",
        examples=["2026-01-01"],
    ),
    end_date: Optional[str] = Query(
        default=None,
        description="Inclusive upper bound (YYYY-MM-DD). Blank means no bound.",
        examples=["2026-03-31"],
    ),
    subject: Optional[str] = Query(
        default=None,
        description="Exact, case-sensitive cat name.",
        examples=["Tom"],
    ),
    db: Session = Depends(get_db),
):
    """
    All filters are optional and combined with AND.

    `chart.labels` is the sorted set of dates across the filtered rows and
    every dataset is aligned to it; `null` marks a date with no reading
    for that cat.
    """
    criteria = EntryFilter.from_params(start_date=start_date, end_date=end_date, subject=subject)
    listing = list_weights(db, criteria)
    return EntryListResponse(
        entries=[_entry_out(e) for e in listing.entries],
        subjects=listing.subjects,
        filters=FiltersOut(**listing.criteria.to_dict()),
        chart=_chart(listing.projection),
    )
