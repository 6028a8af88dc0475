"""
User API schemas.

The same field rules apply to registration and to updates; updates just make
every field optional.
"""

from __future__ import annotations

from typing import Annotated

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel

from auth.schemas import Role

# bcrypt only looks at the first 72 bytes and newer releases refuse longer input.
MAX_PASSWORD_BYTES = 72


def check_user_name(value: str) -> str:
    value = value.strip()
    if len(value) < 3:
        raise ValueError("Username should be at least 3 characters long")
    return value


def check_email(value: str) -> str:
    """
    Validate the address and return it lowercased; uniqueness is case-insensitive.
    """
    try:
        result = validate_email(value.strip(), check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError("Invalid email address") from exc
    return result.normalized.lower()


def check_password(value: str) -> str:
    if len(value) < 5:
        raise ValueError("Password should be at least 5 characters long")
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password should be at most {MAX_PASSWORD_BYTES} bytes long")
    return value


UserName = Annotated[str, AfterValidator(check_user_name)]
Email = Annotated[str, AfterValidator(check_email)]
Password = Annotated[str, AfterValidator(check_password)]


class UserCreate(BaseModel):
    user_name: UserName
    email: Email
    password: Password


class UserUpdate(BaseModel):
    user_name: UserName | None = None
    email: Email | None = None
    password: Password | None = None


class AdminUserUpdate(UserUpdate):
    role: Role | None = None


class UserResponse(BaseModel):
    """
    Public user shape. Never carries the password hash.
    """

    user_id: int
    user_name: str
    email: str
    role: Role
