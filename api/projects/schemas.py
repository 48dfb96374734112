"""
Pydantic schemas for project endpoints.

The wire format is camelCase (`projectCode`, `projectName`).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CreateProjectRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_code: str | None = Field(default=None, alias="projectCode", max_length=20)
    project_name: str | None = Field(default=None, alias="projectName", max_length=200)
    billable: bool | None = None


class UpdateProjectRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    project_code: str | None = Field(default=None, alias="projectCode", max_length=20)
    project_name: str | None = Field(default=None, alias="projectName", max_length=200)
    billable: bool | None = None
