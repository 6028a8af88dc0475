"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from users.repository import UserRepository, get_user_repository

from . import schemas, service

router = APIRouter()


@router.post("/auth/login")
async def login(
    payload: schemas.LoginRequest,
    repository: UserRepository = Depends(get_user_repository),
) -> schemas.LoginResponse:
    return await service.login(payload, repository)
