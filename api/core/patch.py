"""
Partial-update (PATCH-style) statement builder.

A feature declares a fixed mapping of API field -> column. Only fields that
were present in the request end up in the `SET` list; values are always
passed as parameters, column names only ever come from the mapping.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping


class EmptyPatchError(ValueError):
    pass


@dataclass(frozen=True)
class UpdateStatement:
    sql: str
    args: tuple[Any, ...]


def build_update(
    *,
    table: str,
    key_column: str,
    key_value: Any,
    columns: Mapping[str, str],
    changes: Mapping[str, Any],
) -> UpdateStatement:
    """
    Build `UPDATE <table> SET ... WHERE <key_column> = $1 RETURNING <key_column>`.

    `changes` holds only the fields the caller wants to write (explicit None
    included). Keys not present in `columns` are ignored. Column order follows
    `columns`, so the same patch always yields the same SQL.
    """
    assignments: list[str] = []
    args: list[Any] = [key_value]
    for field, column in columns.items():
        if field not in changes:
            continue
        args.append(changes[field])
        assignments.append(f"{column} = ${len(args)}")

    if not assignments:
        raise EmptyPatchError("No fields to update")

    sql = (
        f"UPDATE {table}\n"
        f"SET {', '.join(assignments)}\n"
        f"WHERE {key_column} = $1\n"
        f"RETURNING {key_column}"
    )
    return UpdateStatement(sql=sql, args=tuple(args))
