"""
Response shapes shared across features.
"""

from __future__ import annotations

from pydantic import BaseModel


class MessageResponse(BaseModel):
    message: str
    id: int | None = None
