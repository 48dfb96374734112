"""
Project API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from core.db import Database, get_db

from . import schemas, service

router = APIRouter()


@router.get("/api/projects")
async def list_projects(db: Database = Depends(get_db)) -> list[dict]:
    """
    Active projects, ordered by project name.
    """
    return await service.active_projects(db)


@router.post("/api/projects")
async def create_project(
    request: schemas.CreateProjectRequest,
    db: Database = Depends(get_db),
) -> dict:
    return await service.add_project(db, request)


@router.put("/api/projects/{project_id}")
async def update_project(
    project_id: int,
    request: schemas.UpdateProjectRequest,
    db: Database = Depends(get_db),
) -> dict:
    return await service.edit_project(db, project_id, request)
