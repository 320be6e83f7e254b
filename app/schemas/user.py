"""User-related schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel

Gender = Literal["Male", "Female"]


class UserIdentity(BaseModel):
    """Identity subset embedded in other payloads."""

    id: str | None = None
    full_name: str | None = None
    email: str | None = None


class UserResponse(BaseModel):
    """Public user representation."""

    id: str
    full_name: str
    phone: str | None = None
    email: str | None = None
    gender: Gender | None = None
    age: int | None = None
    role: str
    is_verified: bool = False
    created_at: datetime | None = None
