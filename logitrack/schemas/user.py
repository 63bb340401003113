# logitrack/schemas/user.py
from typing import Optional

from pydantic import BaseModel, EmailStr, Field


class CreateUserRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    display_name: str = Field(alias="displayName", min_length=1)
    role: Optional[str] = None

    class Config:
        populate_by_name = True


class RoleUpdateRequest(BaseModel):
    role: Optional[str] = None
    is_admin: Optional[bool] = Field(default=None, alias="isAdmin")

    class Config:
        populate_by_name = True


class SessionRequest(BaseModel):
    token: str
    refresh_token: str = Field(default="", alias="refreshToken")

    class Config:
        populate_by_name = True
