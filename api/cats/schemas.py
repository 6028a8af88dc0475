"""
Cat API schemas.

Reads and writes use different shapes: `Cat` embeds the owner summary from
the join, `CatCreate` carries only the owner's id.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field


class Coordinates(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class OwnerSummary(BaseModel):
    user_id: int
    user_name: str


class Cat(BaseModel):
    cat_id: int
    cat_name: str
    weight: float
    filename: str | None = None
    birthdate: date
    coords: Coordinates
    owner: OwnerSummary


class CatFields(BaseModel):
    """
    Client-supplied fields of a new cat (multipart form).
    """

    cat_name: str = Field(..., min_length=2, max_length=100)
    weight: float = Field(..., gt=0)
    birthdate: date
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class CatCreate(BaseModel):
    cat_name: str
    weight: float
    owner: int
    filename: str | None = None
    birthdate: date
    coords: Coordinates


class CatUpdate(BaseModel):
    cat_name: str | None = Field(default=None, min_length=2, max_length=100)
    weight: float | None = Field(default=None, gt=0)
    birthdate: date | None = None
    coords: Coordinates | None = None
