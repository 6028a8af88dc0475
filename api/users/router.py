"""
User API endpoints.

`/users/token` and the self-service routes are declared before `/users/{user_id}`.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from auth import dependencies as auth_dependencies
from auth.schemas import AuthUser
from core.schemas import MessageResponse

from . import schemas, service
from .repository import UserRepository, get_user_repository

router = APIRouter()


@router.get("/users")
async def list_users(
    repository: UserRepository = Depends(get_user_repository),
) -> list[schemas.UserResponse]:
    return await service.list_users(repository)


@router.get("/users/token")
async def check_token(
    caller: AuthUser | None = Depends(auth_dependencies.get_optional_user),
) -> AuthUser:
    return service.check_token(caller)


@router.get("/users/{user_id}")
async def get_user(
    user_id: int,
    repository: UserRepository = Depends(get_user_repository),
) -> schemas.UserResponse:
    return await service.get_user(user_id, repository)


@router.post("/users", response_model_exclude_none=True)
async def create_user(
    payload: schemas.UserCreate,
    repository: UserRepository = Depends(get_user_repository),
) -> MessageResponse:
    return await service.create_user(payload, repository)


@router.put("/users", response_model_exclude_none=True)
async def update_current_user(
    payload: schemas.UserUpdate,
    caller: AuthUser = Depends(auth_dependencies.get_current_user),
    repository: UserRepository = Depends(get_user_repository),
) -> MessageResponse:
    return await service.update_current(payload, caller, repository)


@router.put("/users/{user_id}", response_model_exclude_none=True)
async def update_user(
    user_id: int,
    payload: schemas.AdminUserUpdate,
    caller: AuthUser = Depends(auth_dependencies.get_current_user),
    repository: UserRepository = Depends(get_user_repository),
) -> MessageResponse:
    return await service.update_user(payload, user_id, caller, repository)


@router.delete("/users", response_model_exclude_none=True)
async def delete_current_user(
    caller: AuthUser = Depends(auth_dependencies.get_current_user),
    repository: UserRepository = Depends(get_user_repository),
) -> MessageResponse:
    return await service.delete_current(caller, repository)


@router.delete("/users/{user_id}", response_model_exclude_none=True)
async def delete_user(
    user_id: int,
    caller: AuthUser = Depends(auth_dependencies.get_current_user),
    repository: UserRepository = Depends(get_user_repository),
) -> MessageResponse:
    return await service.delete_user(user_id, caller, repository)
