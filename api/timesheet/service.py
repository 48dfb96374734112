"""
Timesheet business logic.
"""

from __future__ import annotations

import logging
from datetime import date

from core.db import Database
from core.errors import database_failure

from . import repository, schemas

logger = logging.getLogger(__name__)


def _to_entry(row: dict) -> dict:
    hours = row["hours"]
    return {
        "projectId": int(row["project_id"]),
        "entryDate": row["entry_date"],
        "hours": float(hours) if hours is not None else None,
        "taskDescription": row["task_description"],
        "projectCode": str(row["project_code"]),
        "projectName": str(row["project_name"]),
        "billable": bool(row["billable"]),
    }


async def week_entries(db: Database, *, member_id: int, week_start: date) -> list[dict]:
    """
    All entries of one member for the week starting at `week_start`.
    An empty list just means nothing was logged yet.
    """
    with database_failure("Failed to fetch timesheet data"):
        rows = await repository.list_week_entries(db, member_id=member_id, week_start=week_start)
    return [_to_entry(row) for row in rows]


async def save_entry(db: Database, payload: schemas.SaveTimeEntryRequest) -> dict:
    # Zero hours and blank descriptions count as "nothing entered".
    hours = payload.hours or None
    task_description = payload.task_description or None

    with database_failure("Failed to save timesheet entry"):
        result = await repository.save_time_entry(
            db,
            member_id=payload.member_id,
            project_id=payload.project_id,
            entry_date=payload.entry_date,
            week_starting=payload.week_starting,
            hours=hours,
            task_description=task_description,
        )

    logger.info(
        "time_entry_saved member_id=%s project_id=%s entry_date=%s result=%s",
        payload.member_id,
        payload.project_id,
        payload.entry_date.isoformat(),
        result,
    )
    return {"success": True, "result": result}
