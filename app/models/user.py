"""User model — the owner of every portfolio and profile row."""

import uuid
from datetime import datetime

from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid

USERNAME_PATTERN = r"^[a-z0-9_\-]+$"


class User(TimestampMixin, SQLModel, table=True):
    __tablename__ = "users"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    email: str = Field(max_length=320, nullable=False, unique=True, index=True)
    username: str = Field(max_length=50, nullable=False, unique=True, index=True)
    password_hash: str = Field(nullable=False)
    name: str = Field(default="", max_length=255)

    # Public profile fields shown on published portfolios
    job_title: str | None = Field(default=None, max_length=255)
    bio: str | None = Field(default=None, max_length=5000)
    location: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    website: str | None = Field(default=None, max_length=500)
    image_url: str | None = Field(default=None, max_length=1000)

    is_active: bool = Field(default=True)


# ── Pydantic schemas ─────────────────────────────────────────

class UserRead(SQLModel):
    id: uuid.UUID
    email: str
    username: str
    name: str
    job_title: str | None
    bio: str | None
    location: str | None
    phone: str | None
    website: str | None
    image_url: str | None
    is_active: bool
    created_at: datetime


class UserPublic(SQLModel):
    """Owner details exposed on a public portfolio page (no email)."""
    username: str
    name: str
    job_title: str | None
    bio: str | None
    location: str | None
    website: str | None
    image_url: str | None


class ProfileUpdate(SQLModel):
    name: str | None = Field(default=None, max_length=255)
    job_title: str | None = Field(default=None, max_length=255)
    bio: str | None = Field(default=None, max_length=5000)
    location: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    website: str | None = Field(default=None, max_length=500)
    image_url: str | None = Field(default=None, max_length=1000)
