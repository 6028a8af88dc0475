"""
Cat API endpoints.
"""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, File, Form, UploadFile

from auth import dependencies as auth_dependencies
from auth.schemas import AuthUser
from core import uploads
from core.schemas import MessageResponse

from . import schemas, service
from .repository import CatRepository, get_cat_repository

router = APIRouter()


@router.get("/cats")
async def list_cats(
    repository: CatRepository = Depends(get_cat_repository),
) -> list[schemas.Cat]:
    return await service.list_cats(repository)


@router.get("/cats/{cat_id}")
async def get_cat(
    cat_id: int,
    repository: CatRepository = Depends(get_cat_repository),
) -> schemas.Cat:
    return await service.get_cat(cat_id, repository)


@router.post("/cats", response_model_exclude_none=True)
async def create_cat(
    cat_name: str = Form(..., min_length=2, max_length=100),
    weight: float = Form(..., gt=0),
    birthdate: date = Form(...),
    lat: float = Form(..., ge=-90, le=90),
    lng: float = Form(..., ge=-180, le=180),
    file: UploadFile | None = File(default=None),
    current_user: AuthUser = Depends(auth_dependencies.get_current_user),
    repository: CatRepository = Depends(get_cat_repository),
) -> MessageResponse:
    """
    Multipart form with an optional image. Any `owner` field is ignored.
    """
    fields = schemas.CatFields(cat_name=cat_name, weight=weight, birthdate=birthdate, lat=lat, lng=lng)
    filename = await uploads.save_image(file) if uploads.has_upload(file) else None
    try:
        return await service.create_cat(fields, current_user.user_id, filename, repository)
    except Exception:
        if filename is not None:
            await uploads.discard_image(filename)
        raise


@router.put("/cats/{cat_id}", response_model_exclude_none=True)
async def update_cat(
    cat_id: int,
    changes: schemas.CatUpdate,
    current_user: AuthUser = Depends(auth_dependencies.get_current_user),
    repository: CatRepository = Depends(get_cat_repository),
) -> MessageResponse:
    return await service.update_cat(cat_id, changes, current_user.user_id, current_user.role, repository)


@router.delete("/cats/{cat_id}", response_model_exclude_none=True)
async def delete_cat(
    cat_id: int,
    _: AuthUser = Depends(auth_dependencies.get_current_user),
    repository: CatRepository = Depends(get_cat_repository),
) -> MessageResponse:
    return await service.delete_cat(cat_id, repository)
