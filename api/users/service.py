"""
User business logic: role guards and request shaping.
"""

from __future__ import annotations

import logging
from typing import Any

from auth import security
from auth.schemas import AuthUser
from core.errors import AuthError, ValidationFailed
from core.schemas import MessageResponse

from . import schemas
from .repository import UserRepository

logger = logging.getLogger(__name__)


def _require_admin(caller: AuthUser) -> None:
    if not caller.is_admin:
        raise AuthError("Admin only")


def _changes_from(payload: schemas.UserUpdate) -> dict[str, Any]:
    changes = payload.model_dump(exclude_none=True)
    if not changes:
        raise ValidationFailed.single("body", "No fields to update")

    password = changes.pop("password", None)
    if password is not None:
        changes["password_hash"] = security.hash_password(password)
    return changes


async def list_users(repository: UserRepository) -> list[schemas.UserResponse]:
    return await repository.get_all_users()


async def get_user(user_id: int, repository: UserRepository) -> schemas.UserResponse:
    return await repository.get_user(user_id)


async def create_user(payload: schemas.UserCreate, repository: UserRepository) -> MessageResponse:
    password_hash = security.hash_password(payload.password)
    user_id = await repository.add_user(
        user_name=payload.user_name,
        email=payload.email,
        password_hash=password_hash,
    )
    logger.info("user_created user_id=%s", user_id)
    return MessageResponse(message="User added", id=user_id)


async def update_user(
    payload: schemas.AdminUserUpdate,
    user_id: int,
    caller: AuthUser,
    repository: UserRepository,
) -> MessageResponse:
    _require_admin(caller)
    await repository.update_user(_changes_from(payload), user_id)
    logger.info("user_updated user_id=%s by=%s", user_id, caller.user_id)
    return MessageResponse(message="User updated")


async def update_current(
    payload: schemas.UserUpdate,
    caller: AuthUser,
    repository: UserRepository,
) -> MessageResponse:
    # Always the caller's own row; role is not part of UserUpdate.
    await repository.update_user(_changes_from(payload), caller.user_id)
    logger.info("user_updated user_id=%s by=%s", caller.user_id, caller.user_id)
    return MessageResponse(message="User updated")


async def delete_user(user_id: int, caller: AuthUser, repository: UserRepository) -> MessageResponse:
    _require_admin(caller)
    await repository.delete_user(user_id)
    logger.info("user_deleted user_id=%s by=%s", user_id, caller.user_id)
    return MessageResponse(message="User deleted")


async def delete_current(caller: AuthUser, repository: UserRepository) -> MessageResponse:
    await repository.delete_user(caller.user_id)
    logger.info("user_deleted user_id=%s by=%s", caller.user_id, caller.user_id)
    return MessageResponse(message="User deleted")


def check_token(caller: AuthUser | None) -> AuthUser:
    if caller is None:
        raise AuthError("token not valid")
    return caller
