"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

Role = Literal["user", "admin"]


class AuthUser(BaseModel):
    """
    Identity of the caller, as carried by the access token.
    """

    user_id: int
    user_name: str
    email: str
    role: Role = "user"

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    password: str = Field(..., min_length=1, max_length=128)


class LoginUser(BaseModel):
    user_id: int
    user_name: str
    email: str
    role: Role


class LoginResponse(BaseModel):
    message: str
    token: str
    user: LoginUser
