"""Skill model — a named, rated skill on the owner's profile."""

import uuid

from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid


class Skill(TimestampMixin, SQLModel, table=True):
    __tablename__ = "skills"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)

    name: str = Field(max_length=100, nullable=False)
    category: str = Field(default="General", max_length=100)
    proficiency: int = Field(default=50, ge=0, le=100)
    order: int = Field(default=0)


# ── Pydantic schemas ─────────────────────────────────────────

class SkillCreate(SQLModel):
    name: str = Field(min_length=1, max_length=100)
    category: str = Field(default="General", max_length=100)
    proficiency: int = Field(default=50, ge=0, le=100)
    order: int = 0


class SkillUpdate(SQLModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    category: str | None = Field(default=None, max_length=100)
    proficiency: int | None = Field(default=None, ge=0, le=100)
    order: int | None = None


class SkillRead(SQLModel):
    id: uuid.UUID
    name: str
    category: str
    proficiency: int
    order: int
