"""
Member persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import patch
from core.db import Database

# API field -> column, for partial updates.
UPDATABLE_COLUMNS = {
    "name": "name",
    "email": "email",
}


async def list_active_members(db: Database) -> list[dict]:
    return await db.fetch_all(
        """
        SELECT member_id, name
        FROM members
        WHERE active = true
        ORDER BY name ASC
        """
    )


async def get_member_by_name(db: Database, name: str) -> dict | None:
    # Active or not: a deactivated member still owns the name.
    return await db.fetch_one(
        """
        SELECT member_id
        FROM members
        WHERE name = $1
        LIMIT 1
        """,
        name,
    )


async def create_member(db: Database, *, name: str, email: str | None) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO members (name, email, active)
        VALUES ($1, $2, true)
        RETURNING member_id
        """,
        name,
        email,
    )
    if row is None:
        raise RuntimeError("Failed to create member.")
    return row


async def update_member(db: Database, member_id: int, changes: dict[str, Any]) -> bool:
    """
    Apply a partial update. Returns False when no member has that id.

    Raises `patch.EmptyPatchError` if `changes` holds no updatable field.
    """
    stmt = patch.build_update(
        table="members",
        key_column="member_id",
        key_value=member_id,
        columns=UPDATABLE_COLUMNS,
        changes=changes,
    )
    row = await db.fetch_one(stmt.sql, *stmt.args)
    return row is not None
