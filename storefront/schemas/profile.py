# storefront/schemas/profile.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel, Field


class ProfileRead(SQLModel):
    id: uuid.UUID
    name: str
    email: EmailStr
    role: Literal["user", "admin"]
    created_at: datetime
    updated_at: datetime


class ProfileResponse(SQLModel):
    """
    Envelope the storefront client expects: `{"success": true, "user": {...}}`.
    """

    success: bool = True
    user: ProfileRead


class ProfileUpdate(SQLModel):
    """
    Profile edit. Email and role follow the identity provider and an
    admin respectively, so only the display name is accepted.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=50)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v
