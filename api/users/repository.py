"""
User persistence (raw SQL).

One statement per method. Failures are raised as tagged errors so the
service layer only shapes requests.
"""

from __future__ import annotations

from typing import Any

import asyncpg
from fastapi import Depends

from core import db
from core.errors import NotFoundError, PersistenceError

from . import schemas

_PUBLIC_COLUMNS = "user_id, user_name, email, role"

# Columns a caller may change, in SET-clause order.
UPDATABLE_COLUMNS = ("user_name", "email", "password_hash", "role")


def _to_user_response(row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        user_id=int(row["user_id"]),
        user_name=str(row["user_name"]),
        email=str(row["email"]),
        role=row["role"],
    )


def build_update(changes: dict[str, Any], user_id: int) -> tuple[str, list[Any]]:
    assignments: list[str] = []
    args: list[Any] = []
    for column in UPDATABLE_COLUMNS:
        if column in changes:
            args.append(changes[column])
            assignments.append(f"{column} = ${len(args)}")

    args.append(user_id)
    sql = f"UPDATE users SET {', '.join(assignments)} WHERE user_id = ${len(args)}"
    return sql, args


class UserRepository:
    def __init__(self, database: db.Database) -> None:
        self.db = database

    async def get_all_users(self) -> list[schemas.UserResponse]:
        rows = await self.db.fetch_all(
            f"""
            SELECT {_PUBLIC_COLUMNS}
            FROM users
            ORDER BY user_id
            """
        )
        if not rows:
            raise NotFoundError("No users found")
        return [_to_user_response(row) for row in rows]

    async def get_user(self, user_id: int) -> schemas.UserResponse:
        row = await self.db.fetch_one(
            f"""
            SELECT {_PUBLIC_COLUMNS}
            FROM users
            WHERE user_id = $1
            """,
            user_id,
        )
        if row is None:
            raise NotFoundError("No users found")
        return _to_user_response(row)

    async def add_user(self, *, user_name: str, email: str, password_hash: str) -> int:
        try:
            row = await self.db.fetch_one(
                """
                INSERT INTO users (user_name, email, password_hash, role)
                VALUES ($1, $2, $3, 'user')
                RETURNING user_id
                """,
                user_name,
                email,
                password_hash,
            )
        except asyncpg.UniqueViolationError as exc:
            raise PersistenceError("Email is already registered") from exc
        if row is None:
            raise PersistenceError("No users added")
        return int(row["user_id"])

    async def update_user(self, changes: dict[str, Any], user_id: int) -> None:
        if not changes:
            raise PersistenceError("No users updated")

        sql, args = build_update(changes, user_id)
        try:
            affected = await self.db.execute(sql, *args)
        except asyncpg.UniqueViolationError as exc:
            raise PersistenceError("Email is already registered") from exc
        if affected == 0:
            raise PersistenceError("No users updated")

    async def delete_user(self, user_id: int) -> None:
        affected = await self.db.execute(
            """
            DELETE FROM users
            WHERE user_id = $1
            """,
            user_id,
        )
        if affected == 0:
            raise PersistenceError("No users deleted")

    async def get_user_login(self, email: str) -> dict:
        """
        Full row, hash included, for credential checks only.

        An unknown email is reported with status 200, not 401/404.
        """
        row = await self.db.fetch_one(
            """
            SELECT user_id, user_name, email, role, password_hash
            FROM users
            WHERE lower(email) = lower($1)
            """,
            (email or "").strip(),
        )
        if row is None:
            raise NotFoundError("Invalid username/password", status_code=200)
        return row


def get_user_repository(database: db.Database = Depends(db.get_database)) -> UserRepository:
    return UserRepository(database)
