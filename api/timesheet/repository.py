"""
Time-entry persistence (raw SQL).

A time entry is identified by its natural key (member, project, entry date).
Saving is done in one transaction guarded by an advisory lock on that key,
so two concurrent saves of the same key cannot both insert.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from core.db import Database

INSERTED = "inserted"
UPDATED = "updated"
SKIPPED = "skipped"


def natural_key(member_id: int, project_id: int, entry_date: date) -> str:
    return f"time_entry:{member_id}:{project_id}:{entry_date.isoformat()}"


async def list_week_entries(db: Database, *, member_id: int, week_start: date) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT te.project_id, te.entry_date, te.hours, te.task_description,
               p.project_code, p.project_name, p.billable
        FROM time_entries te
        JOIN projects p ON te.project_id = p.project_id
        WHERE te.member_id = $1
          AND te.week_starting = $2
        ORDER BY te.entry_date ASC, p.project_name ASC
        """,
        member_id,
        week_start,
    )


async def save_time_entry(
    db: Database,
    *,
    member_id: int,
    project_id: int,
    entry_date: date,
    week_starting: date,
    hours: Decimal | None,
    task_description: str | None,
) -> str:
    """
    Insert or update the entry for (member, project, entry_date).

    - existing row: hours/description/modified_date are overwritten, even
      with NULLs
    - no row and nothing to store: no write
    - no row otherwise: insert

    Returns one of INSERTED / UPDATED / SKIPPED.
    """
    async with db.transaction() as conn:
        # Released automatically at commit/rollback.
        await conn.execute(
            "SELECT pg_advisory_xact_lock(hashtext($1))",
            natural_key(member_id, project_id, entry_date),
        )

        existing = await conn.fetchrow(
            """
            SELECT entry_id
            FROM time_entries
            WHERE member_id = $1
              AND project_id = $2
              AND entry_date = $3
            LIMIT 1
            """,
            member_id,
            project_id,
            entry_date,
        )

        if existing is not None:
            await conn.execute(
                """
                UPDATE time_entries
                SET hours = $2,
                    task_description = $3,
                    modified_date = now()
                WHERE entry_id = $1
                """,
                existing["entry_id"],
                hours,
                task_description,
            )
            return UPDATED

        if hours is None and task_description is None:
            return SKIPPED

        await conn.execute(
            """
            INSERT INTO time_entries
                (member_id, project_id, entry_date, week_starting, hours, task_description)
            VALUES ($1, $2, $3, $4, $5, $6)
            """,
            member_id,
            project_id,
            entry_date,
            week_starting,
            hours,
            task_description,
        )
        return INSERTED
