"""Project model — a showcased piece of work."""

import uuid
from datetime import datetime

from pydantic import HttpUrl
from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid


class Project(TimestampMixin, SQLModel, table=True):
    __tablename__ = "projects"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)

    title: str = Field(max_length=200, nullable=False)
    description: str = Field(max_length=500, nullable=False)
    technologies: list[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    live_url: str | None = Field(default=None, max_length=1000)
    repo_url: str | None = Field(default=None, max_length=1000)
    image_url: str | None = Field(default=None, max_length=1000)
    is_featured: bool = Field(default=False)
    order: int = Field(default=0)


# ── Pydantic schemas ─────────────────────────────────────────

class ProjectCreate(SQLModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=10, max_length=500)
    technologies: list[str] = Field(default_factory=list)
    live_url: HttpUrl | None = None
    repo_url: HttpUrl | None = None
    image_url: str | None = Field(default=None, max_length=1000)
    is_featured: bool = False
    order: int = 0


class ProjectUpdate(SQLModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=10, max_length=500)
    technologies: list[str] | None = None
    live_url: HttpUrl | None = None
    repo_url: HttpUrl | None = None
    image_url: str | None = Field(default=None, max_length=1000)
    is_featured: bool | None = None
    order: int | None = None


class ProjectRead(SQLModel):
    id: uuid.UUID
    title: str
    description: str
    technologies: list[str]
    live_url: str | None
    repo_url: str | None
    image_url: str | None
    is_featured: bool
    order: int
    updated_at: datetime
