"""
Weight entry request / response schemas.

Submit:  POST   /entries        → EntryRequest → EntryStatusResponse
Delete:  DELETE /entries/{id}   →                DeleteStatusResponse
List:    GET    /entries        →                EntryListResponse
"""
from __future__ import annotations

from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Submit
# ---------------------------------------------------------------------------


class EntryRequest(BaseModel):
    """A weight reading to add, or to overwrite if (subject, date) exists.

    Fields are loosely typed on purpose: the entry service owns validation
    and reports the first violated constraint in one message.
    """
    subject: Optional[str] = Field(
        default=None,
        description="The cat's name. Leading/trailing whitespace is stripped.",
        examples=["Tom"],
    )
    # Any, not float: lax float coercion would turn JSON true into 1.0.
    weight: Any = Field(
        default=None,
        description="Positive weight in kilograms, as a number or numeric string.",
        examples=[4.35],
    )
    date: Optional[str] = Field(
        default=None,
        description="ISO calendar date (YYYY-MM-DD).",
        examples=["2026-02-20"],
    )


class EntryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    subject: str
    weight: float
    date: str = Field(description="ISO date of the reading.")


class EntryStatusResponse(BaseModel):
    status: Literal["success"] = "success"
    outcome: Literal["created", "updated"]
    message: str
    entry: EntryOut


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------

class DeleteStatusResponse(BaseModel):
    status: Literal["success", "info"]
    outcome: Literal["deleted", "not_found"]
    message: str
    id: int


# ---------------------------------------------------------------------------
# List
# ---------------------------------------------------------------------------

class ChartDataset(BaseModel):
    """One line of a Chart.js line chart. `data` is aligned to `labels`."""
    label: str
    subject: str
    data: list[Optional[float]] = Field(description="Weight per label; null marks a gap.")
    borderColor: str
    tension: float = 0.1
    fill: bool = False
    spanGaps: bool = True


class ChartData(BaseModel):
    labels: list[str] = Field(description="Shared, sorted ISO date axis.")
    datasets: list[ChartDataset]


class FiltersOut(BaseModel):
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    subject: Optional[str] = None


class EntryListResponse(BaseModel):
    entries: list[EntryOut] = Field(description="Filtered entries, date ascending.")
    subjects: list[str] = Field(description="Every known cat, for the filter dropdown.")
    filters: FiltersOut
    chart: ChartData
