"""
Cat business logic: caller identity and ownership shaping.
"""

from __future__ import annotations

import logging

from core.errors import ValidationFailed
from core.schemas import MessageResponse

from . import schemas
from .policy import ownership_scope
from .repository import CatRepository

logger = logging.getLogger(__name__)


async def list_cats(repository: CatRepository) -> list[schemas.Cat]:
    return await repository.get_all_cats()


async def get_cat(cat_id: int, repository: CatRepository) -> schemas.Cat:
    return await repository.get_cat(cat_id)


async def create_cat(
    fields: schemas.CatFields,
    owner_id: int,
    filename: str | None,
    repository: CatRepository,
) -> MessageResponse:
    # The owner is always the caller; the request body has no say.
    data = schemas.CatCreate(
        cat_name=fields.cat_name,
        weight=fields.weight,
        owner=owner_id,
        filename=filename,
        birthdate=fields.birthdate,
        coords=schemas.Coordinates(lat=fields.lat, lng=fields.lng),
    )
    cat_id = await repository.add_cat(data)
    logger.info("cat_created cat_id=%s owner=%s", cat_id, owner_id)
    return MessageResponse(message="Cat added", id=cat_id)


async def update_cat(
    cat_id: int,
    changes: schemas.CatUpdate,
    user_id: int,
    role: str,
    repository: CatRepository,
) -> MessageResponse:
    if not changes.model_dump(exclude_none=True):
        raise ValidationFailed.single("body", "No fields to update")

    await repository.update_cat(cat_id, changes, ownership_scope(role, user_id))
    logger.info("cat_updated cat_id=%s by=%s role=%s", cat_id, user_id, role)
    return MessageResponse(message="Cat updated")


async def delete_cat(cat_id: int, repository: CatRepository) -> MessageResponse:
    await repository.delete_cat(cat_id)
    logger.info("cat_deleted cat_id=%s", cat_id)
    return MessageResponse(message="Cat deleted")
