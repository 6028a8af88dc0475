"""
Cat persistence (raw SQL).

`coords` is a PostgreSQL `point`: written with point(lat, lng) and read back
as coords[0] / coords[1].
"""

from __future__ import annotations

from typing import Any

import asyncpg
from fastapi import Depends

from core import db
from core.errors import NotFoundError, PersistenceError

from . import schemas
from .policy import MutationScope, scoped_predicate

_SELECT_CATS = """
    SELECT c.cat_id, c.cat_name, c.weight, c.filename, c.birthdate,
           c.coords[0] AS lat, c.coords[1] AS lng,
           u.user_id AS owner_id, u.user_name AS owner_name
    FROM cats c
    JOIN users u ON c.owner = u.user_id
"""


def _to_cat(row: dict) -> schemas.Cat:
    return schemas.Cat(
        cat_id=int(row["cat_id"]),
        cat_name=str(row["cat_name"]),
        weight=float(row["weight"]),
        filename=row.get("filename"),
        birthdate=row["birthdate"],
        coords=schemas.Coordinates(lat=float(row["lat"]), lng=float(row["lng"])),
        owner=schemas.OwnerSummary(
            user_id=int(row["owner_id"]),
            user_name=str(row["owner_name"]),
        ),
    )


def build_update(changes: schemas.CatUpdate, cat_id: int, scope: MutationScope) -> tuple[str, list[Any]]:
    assignments: list[str] = []
    args: list[Any] = []
    for column in ("cat_name", "weight", "birthdate"):
        value = getattr(changes, column)
        if value is not None:
            args.append(value)
            assignments.append(f"{column} = ${len(args)}")

    if changes.coords is not None:
        args.extend([changes.coords.lat, changes.coords.lng])
        assignments.append(f"coords = point(${len(args) - 1}, ${len(args)})")

    predicate = scoped_predicate(scope, cat_id, args)
    sql = f"UPDATE cats SET {', '.join(assignments)} WHERE {predicate}"
    return sql, args


class CatRepository:
    def __init__(self, database: db.Database) -> None:
        self.db = database

    async def get_all_cats(self) -> list[schemas.Cat]:
        rows = await self.db.fetch_all(_SELECT_CATS + " ORDER BY c.cat_id")
        if not rows:
            raise NotFoundError("No cats found")
        return [_to_cat(row) for row in rows]

    async def get_cat(self, cat_id: int) -> schemas.Cat:
        row = await self.db.fetch_one(_SELECT_CATS + " WHERE c.cat_id = $1", cat_id)
        if row is None:
            raise NotFoundError("Cat not found")
        return _to_cat(row)

    async def add_cat(self, data: schemas.CatCreate) -> int:
        try:
            row = await self.db.fetch_one(
                """
                INSERT INTO cats (cat_name, weight, owner, filename, birthdate, coords)
                VALUES ($1, $2, $3, $4, $5, point($6, $7))
                RETURNING cat_id
                """,
                data.cat_name,
                data.weight,
                data.owner,
                data.filename,
                data.birthdate,
                data.coords.lat,
                data.coords.lng,
            )
        except asyncpg.ForeignKeyViolationError as exc:
            raise PersistenceError("No cats added: owner does not exist") from exc
        if row is None:
            raise PersistenceError("No cats added")
        return int(row["cat_id"])

    async def update_cat(self, cat_id: int, changes: schemas.CatUpdate, scope: MutationScope) -> None:
        sql, args = build_update(changes, cat_id, scope)
        affected = await self.db.execute(sql, *args)
        if affected == 0:
            raise PersistenceError("No cats updated or you do not have permission")

    async def delete_cat(self, cat_id: int) -> None:
        # Not owner-scoped; see DESIGN.md.
        affected = await self.db.execute(
            """
            DELETE FROM cats
            WHERE cat_id = $1
            """,
            cat_id,
        )
        if affected == 0:
            raise PersistenceError("No cats deleted")


def get_cat_repository(database: db.Database = Depends(db.get_database)) -> CatRepository:
    return CatRepository(database)
