"""SocialLink model — an external profile URL."""

import uuid

from pydantic import HttpUrl
from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid


class SocialLink(TimestampMixin, SQLModel, table=True):
    __tablename__ = "social_links"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)

    platform: str = Field(max_length=50, nullable=False)
    url: str = Field(max_length=1000, nullable=False)


# ── Pydantic schemas ─────────────────────────────────────────

class SocialLinkCreate(SQLModel):
    platform: str = Field(min_length=1, max_length=50)
    url: HttpUrl


class SocialLinkUpdate(SQLModel):
    platform: str | None = Field(default=None, min_length=1, max_length=50)
    url: HttpUrl | None = None


class SocialLinkRead(SQLModel):
    id: uuid.UUID
    platform: str
    url: str
