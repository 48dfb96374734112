"""
Team-member business logic.

Scope:
- active member listing
- creation with an application-level duplicate-name check
- partial updates through `core.patch`
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

DUPLICATE_NAME = "Team member with this name already exists"


def _to_member(row: dict) -> dict:
    return {"id": int(row["member_id"]), "name": str(row["name"])}


async def active_members(db: Database) -> list[dict]:
    with database_failure("Failed to fetch members"):
        rows = await repository.list_active_members(db)
    return [_to_member(row) for row in rows]


async def add_member(db: Database, payload: schemas.CreateMemberRequest) -> dict:
    if not payload.name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name is required")

    with database_failure("Failed to add team member"):
        existing = await repository.get_member_by_name(db, payload.name)
        if existing is not None:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_NAME)

        try:
            row = await repository.create_member(db, name=payload.name, email=payload.email or None)
        except asyncpg.UniqueViolationError as exc:
            # Lost a race with a concurrent create of the same name.
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_NAME) from exc

    logger.info("member_created member_id=%s", row["member_id"])
    return {"success": True, "message": "Team member added successfully"}


async def edit_member(db: Database, member_id: int, payload: schemas.UpdateMemberRequest) -> dict:
    changes = payload.model_dump(exclude_unset=True)
    if "name" in changes and not changes["name"]:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Name cannot be empty")

    with database_failure("Failed to update team member"):
        try:
            found = await repository.update_member(db, member_id, changes)
        except patch.EmptyPatchError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No fields to update") from exc
        except asyncpg.UniqueViolationError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=DUPLICATE_NAME) from exc

    if not found:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Team member not found")

    logger.info("member_updated member_id=%s fields=%s", member_id, ",".join(sorted(changes)))
    return {"success": True, "message": "Team member updated successfully"}
