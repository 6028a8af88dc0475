"""
Auth business logic.
"""

from __future__ import annotations

import logging

from core.errors import AuthError
from users.repository import UserRepository

from . import schemas, security

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username/password"


async def login(payload: schemas.LoginRequest, repository: UserRepository) -> schemas.LoginResponse:
    # An unknown email surfaces from the lookup itself (see UserRepository.get_user_login).
    user_row = await repository.get_user_login(payload.email)

    is_valid = security.verify_password(payload.password, str(user_row.get("password_hash") or ""))
    if not is_valid:
        raise AuthError(INVALID_CREDENTIALS)

    user = schemas.LoginUser(
        user_id=int(user_row["user_id"]),
        user_name=str(user_row["user_name"]),
        email=str(user_row["email"]),
        role=user_row["role"],
    )
    token = security.build_access_token(
        user_id=user.user_id,
        user_name=user.user_name,
        email=user.email,
        role=user.role,
    )
    logger.info("login_succeeded user_id=%s", user.user_id)
    return schemas.LoginResponse(message="Login successful", token=token, user=user)
