"""Experience model — a position held at a company."""

import uuid
from datetime import date

from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid


class Experience(TimestampMixin, SQLModel, table=True):
    __tablename__ = "experiences"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)

    company: str = Field(max_length=200, nullable=False)
    position: str = Field(max_length=200, nullable=False)
    location: str | None = Field(default=None, max_length=200)
    start_date: date = Field(nullable=False)
    end_date: date | None = Field(default=None)
    is_current: bool = Field(default=False)
    description: str | None = Field(default=None, max_length=2000)


# ── Pydantic schemas ─────────────────────────────────────────

class ExperienceCreate(SQLModel):
    company: str = Field(min_length=1, max_length=200)
    position: str = Field(min_length=1, max_length=200)
    location: str | None = Field(default=None, max_length=200)
    start_date: date
    end_date: date | None = None
    is_current: bool = False
    description: str | None = Field(default=None, max_length=2000)


class ExperienceUpdate(SQLModel):
    company: str | None = Field(default=None, min_length=1, max_length=200)
    position: str | None = Field(default=None, min_length=1, max_length=200)
    location: str | None = Field(default=None, max_length=200)
    start_date: date | None = None
    end_date: date | None = None
    is_current: bool | None = None
    description: str | None = Field(default=None, max_length=2000)


class ExperienceRead(SQLModel):
    id: uuid.UUID
    company: str
    position: str
    location: str | None
    start_date: date
    end_date: date | None
    is_current: bool
    description: str | None
