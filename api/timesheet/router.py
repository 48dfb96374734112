"""
Timesheet API endpoints.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends

from core.db import Database, get_db

from . import schemas, service

router = APIRouter()


@router.get("/api/timesheet/{member_id}/{week_start}")
async def get_timesheet(
    member_id: int,
    week_start: date,
    db: Database = Depends(get_db),
) -> list[dict]:
    return await service.week_entries(db, member_id=member_id, week_start=week_start)


@router.post("/api/timesheet")
async def save_timesheet_entry(
    request: schemas.SaveTimeEntryRequest,
    db: Database = Depends(get_db),
) -> dict:
    """
    Insert or update one entry keyed by (memberId, projectId, entryDate).

    `result` tells whether the entry was inserted, updated or skipped
    (skipped = nothing entered and no existing row).
    """
    return await service.save_entry(db, request)
