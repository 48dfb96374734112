"""
Team-member API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from core.db import Database, get_db

from . import schemas, service

router = APIRouter()


@router.get("/api/members")
async def list_members(db: Database = Depends(get_db)) -> list[dict]:
    """
    Active members, ordered by name.
    """
    return await service.active_members(db)


@router.post("/api/members")
async def create_member(
    request: schemas.CreateMemberRequest,
    db: Database = Depends(get_db),
) -> dict:
    return await service.add_member(db, request)


@router.put("/api/members/{member_id}")
async def update_member(
    member_id: int,
    request: schemas.UpdateMemberRequest,
    db: Database = Depends(get_db),
) -> dict:
    return await service.edit_member(db, member_id, request)
