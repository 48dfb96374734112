"""
Project business logic.
"""

from __future__ import annotations

import logging

import asyncpg
from fastapi import HTTPException, status

from core import patch
from core.db import Database
from core.errors import database_failure

from . import repository, schemas

logger = logging.getLogger(__name__)

DUPLICATE_CODE = "Project with this code already exists"


def _to_project(row: dict) -> dict:
    return {
        "id": int(row["project_id"]),
        "code": str(row["project_code"]),
        "name": str(row["project_name"]),
        "billable": bool(row["billable"]),
    }


async def active_projects(db: Database) -> list[dict]:
    with database_failure("Failed to fetch projects"):
        rows = await repository.list_active_projects(db)
    return [_to_project(row) for row in rows]


async def add_project(db: Database, payload: schemas.CreateProjectRequest) -> dict:
    if not payload.project_code or not payload.project_name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Project code and name are required",
        )

    billable = True if payload.billable is None else payload.billable

    with database_failure("Failed to add project"):
        existing = await repository.get_project_by_code(db, payload.project_code)
        if existing is not None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_CODE)

        try:
            row = await repository.create_project(
                db,
                project_code=payload.project_code,
                project_name=payload.project_name,
                billable=billable,
            )
        except asyncpg.UniqueViolationError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_CODE) from exc

    logger.info("project_created project_id=%s code=%s", row["project_id"], payload.project_code)
    return {"success": True, "message": "Project added successfully"}


async def edit_project(db: Database, project_id: int, payload: schemas.UpdateProjectRequest) -> dict:
    changes = payload.model_dump(exclude_unset=True)
    for field, label in (("project_code", "Project code"), ("project_name", "Project name")):
        if field in changes and not changes[field]:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"{label} cannot be empty")
    if "billable" in changes and changes["billable"] is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Billable cannot be null")

    with database_failure("Failed to update project"):
        try:
            found = await repository.update_project(db, project_id, changes)
        except patch.EmptyPatchError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update") from exc
        except asyncpg.UniqueViolationError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_CODE) from exc

    if not found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Project not found")

    logger.info("project_updated project_id=%s fields=%s", project_id, ",".join(sorted(changes)))
    return {"success": True, "message": "Project updated successfully"}
