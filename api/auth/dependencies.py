"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from fastapi import Depends, Header

from core.errors import AuthError

from . import security
from .schemas import AuthUser


def _extract_bearer_token(authorization: str | None) -> str | None:
    raw = (authorization or "").strip()
    parts = raw.split(" ", 1)
    if len(parts) != 2:
        return None

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        return None
    return token


def identity_from_token(token: str) -> AuthUser | None:
    try:
        payload = security.decode_access_token(token)
    except security.AuthSecurityError:
        return None

    return AuthUser(
        user_id=int(payload["sub"]),
        user_name=str(payload.get("user_name") or ""),
        email=str(payload.get("email") or ""),
        role="admin" if payload.get("role") == "admin" else "user",
    )


async def get_optional_user(authorization: str | None = Header(default=None)) -> AuthUser | None:
    """
    Caller identity, or None when the header is missing or the token is invalid.
    """
    token = _extract_bearer_token(authorization)
    if token is None:
        return None
    return identity_from_token(token)


async def get_current_user(user: AuthUser | None = Depends(get_optional_user)) -> AuthUser:
    if user is None:
        raise AuthError("token not valid")
    return user
