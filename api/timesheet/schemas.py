"""
Pydantic schemas for timesheet endpoints.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class SaveTimeEntryRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    member_id: int = Field(..., alias="memberId")
    project_id: int = Field(..., alias="projectId")
    entry_date: date = Field(..., alias="entryDate")
    week_starting: date = Field(..., alias="weekStarting")
    # Column is numeric(4,2).
    hours: Decimal | None = Field(default=None, ge=0, le=Decimal("99.99"), max_digits=4, decimal_places=2)
    task_description: str | None = Field(default=None, alias="taskDescription", max_length=500)
