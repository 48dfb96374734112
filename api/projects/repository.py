"""
Project persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import patch
from core.db import Database

UPDATABLE_COLUMNS = {
    "project_code": "project_code",
    "project_name": "project_name",
    "billable": "billable",
}


async def list_active_projects(db: Database) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT project_id, project_code, project_name, billable
        FROM projects
        WHERE active = true
        ORDER BY project_name ASC
        """
    )


async def get_project_by_code(db: Database, project_code: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT project_id
        FROM projects
        WHERE project_code = $1
        LIMIT 1
        """,
        project_code,
    )


async def create_project(
    db: Database,
    *,
    project_code: str,
    project_name: str,
    billable: bool,
) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO projects (project_code, project_name, billable, active)
        VALUES ($1, $2, $3, true)
        RETURNING project_id
        """,
        project_code,
        project_name,
        billable,
    )
    if row is None:
        raise RuntimeError("Failed to create project.")
    return row


async def update_project(db: Database, project_id: int, changes: dict[str, Any]) -> bool:
    stmt = patch.build_update(
        table="projects",
        key_column="project_id",
        key_value=project_id,
        columns=UPDATABLE_COLUMNS,
        changes=changes,
    )
    row = await db.fetch_one(stmt.sql, *stmt.args)
    return row is not None
