from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import pytest
from fastapi.testclient import TestClient

import main
from core import patch
from core.db import get_db
from members import repository as members_repository
from projects import repository as projects_repository
from timesheet import repository as timesheet_repository


def _normalize(sql: str) -> str:
    return " ".join(sql.split())


class FakeConnection:
    """
    Stands in for an asyncpg connection inside `Database.transaction()`.
    Understands only the statements `timesheet.repository.save_time_entry` issues.
    """

    def __init__(self, db: "FakeDatabase") -> None:
        self.db = db

    async def execute(self, sql: str, *args: Any) -> str:
        stmt = _normalize(sql)
        self.db.statements.append(stmt)
        if stmt.startswith("SELECT pg_advisory_xact_lock"):
            self.db.locks.append(args[0])
            return "SELECT 1"
        if stmt.startswith("UPDATE time_entries"):
            entry_id, hours, task_description = args
            for entry in self.db.entries:
                if entry["entry_id"] == entry_id:
                    entry["hours"] = hours
                    entry["task_description"] = task_description
                    entry["modified"] += 1
            return "UPDATE 1"
        if stmt.startswith("INSERT INTO time_entries"):
            member_id, project_id, entry_date, week_starting, hours, task_description = args
            self.db.entries.append(
                {
                    "entry_id": len(self.db.entries) + 1,
                    "member_id": member_id,
                    "project_id": project_id,
                    "entry_date": entry_date,
                    "week_starting": week_starting,
                    "hours": hours,
                    "task_description": task_description,
                    "modified": 0,
                }
            )
            return "INSERT 0 1"
        raise AssertionError(f"unexpected statement: {stmt}")

    async def fetchrow(self, sql: str, *args: Any) -> dict | None:
        stmt = _normalize(sql)
        self.db.statements.append(stmt)
        if stmt.startswith("SELECT entry_id FROM time_entries"):
            member_id, project_id, entry_date = args
            for entry in self.db.entries:
                if (entry["member_id"], entry["project_id"], entry["entry_date"]) == (
                    member_id,
                    project_id,
                    entry_date,
                ):
                    return {"entry_id": entry["entry_id"]}
            return None
        raise AssertionError(f"unexpected query: {stmt}")


class FakeDatabase:
    """
    In-memory replacement for `core.db.Database`.

    Set `down = True` to make every call fail like an unreachable server.
    """

    def __init__(self) -> None:
        self.members: list[dict] = []
        self.projects: list[dict] = []
        self.entries: list[dict] = []
        self.statements: list[str] = []
        self.locks: list[str] = []
        self.down = False

    def check(self) -> None:
        if self.down:
            raise ConnectionRefusedError("connection refused")

    async def execute(self, sql: str, *args: Any) -> None:
        self.check()
        self.statements.append(_normalize(sql))

    @asynccontextmanager
    async def transaction(self):
        self.check()
        yield FakeConnection(self)

    def add_member(self, name: str, *, email: str | None = None, active: bool = True) -> dict:
        row = {"member_id": len(self.members) + 1, "name": name, "email": email, "active": active}
        self.members.append(row)
        return row

    def add_project(self, code: str, name: str, *, billable: bool = True, active: bool = True) -> dict:
        row = {
            "project_id": len(self.projects) + 1,
            "project_code": code,
            "project_name": name,
            "billable": billable,
            "active": active,
        }
        self.projects.append(row)
        return row


# In-memory versions of the member/project/timesheet read paths. They keep the
# repository signatures so services call them unchanged.


async def _list_active_members(db: FakeDatabase) -> list[dict]:
    db.check()
    rows = [m for m in db.members if m["active"]]
    return [{"member_id": m["member_id"], "name": m["name"]} for m in sorted(rows, key=lambda m: m["name"])]


async def _get_member_by_name(db: FakeDatabase, name: str) -> dict | None:
    db.check()
    for m in db.members:
        if m["name"] == name:
            return {"member_id": m["member_id"]}
    return None


async def _create_member(db: FakeDatabase, *, name: str, email: str | None) -> dict:
    db.check()
    row = db.add_member(name, email=email)
    return {"member_id": row["member_id"]}


async def _update_member(db: FakeDatabase, member_id: int, changes: dict[str, Any]) -> bool:
    db.check()
    patch.build_update(
        table="members",
        key_column="member_id",
        key_value=member_id,
        columns=members_repository.UPDATABLE_COLUMNS,
        changes=changes,
    )
    for m in db.members:
        if m["member_id"] == member_id:
            for field, column in members_repository.UPDATABLE_COLUMNS.items():
                if field in changes:
                    m[column] = changes[field]
            return True
    return False


async def _list_active_projects(db: FakeDatabase) -> list[dict]:
    db.check()
    rows = [p for p in db.projects if p["active"]]
    return [
        {k: p[k] for k in ("project_id", "project_code", "project_name", "billable")}
        for p in sorted(rows, key=lambda p: p["project_name"])
    ]


async def _get_project_by_code(db: FakeDatabase, project_code: str) -> dict | None:
    db.check()
    for p in db.projects:
        if p["project_code"] == project_code:
            return {"project_id": p["project_id"]}
    return None


async def _create_project(db: FakeDatabase, *, project_code: str, project_name: str, billable: bool) -> dict:
    db.check()
    row = db.add_project(project_code, project_name, billable=billable)
    return {"project_id": row["project_id"]}


async def _update_project(db: FakeDatabase, project_id: int, changes: dict[str, Any]) -> bool:
    db.check()
    patch.build_update(
        table="projects",
        key_column="project_id",
        key_value=project_id,
        columns=projects_repository.UPDATABLE_COLUMNS,
        changes=changes,
    )
    for p in db.projects:
        if p["project_id"] == project_id:
            for field, column in projects_repository.UPDATABLE_COLUMNS.items():
                if field in changes:
                    p[column] = changes[field]
            return True
    return False


async def _list_week_entries(db: FakeDatabase, *, member_id: int, week_start) -> list[dict]:
    db.check()
    projects = {p["project_id"]: p for p in db.projects}
    rows = []
    for e in sorted(db.entries, key=lambda e: e["entry_date"]):
        if e["member_id"] != member_id or e["week_starting"] != week_start:
            continue
        p = projects[e["project_id"]]
        rows.append(
            {
                "project_id": e["project_id"],
                "entry_date": e["entry_date"],
                "hours": e["hours"],
                "task_description": e["task_description"],
                "project_code": p["project_code"],
                "project_name": p["project_name"],
                "billable": p["billable"],
            }
        )
    return rows


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def client(fake_db: FakeDatabase, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setattr(members_repository, "list_active_members", _list_active_members)
    monkeypatch.setattr(members_repository, "get_member_by_name", _get_member_by_name)
    monkeypatch.setattr(members_repository, "create_member", _create_member)
    monkeypatch.setattr(members_repository, "update_member", _update_member)
    monkeypatch.setattr(projects_repository, "list_active_projects", _list_active_projects)
    monkeypatch.setattr(projects_repository, "get_project_by_code", _get_project_by_code)
    monkeypatch.setattr(projects_repository, "create_project", _create_project)
    monkeypatch.setattr(projects_repository, "update_project", _update_project)
    monkeypatch.setattr(timesheet_repository, "list_week_entries", _list_week_entries)

    main.app.dependency_overrides[get_db] = lambda: fake_db
    # No `with`: the lifespan (real pool) is not started.
    test_client = TestClient(main.app)
    try:
        yield test_client
    finally:
        main.app.dependency_overrides.clear()
