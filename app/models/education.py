"""Education model — a degree or course of study."""

import uuid
from datetime import date

from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid


class Education(TimestampMixin, SQLModel, table=True):
    __tablename__ = "education"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)

    institution: str = Field(max_length=200, nullable=False)
    degree: str = Field(max_length=200, nullable=False)
    field_of_study: str | None = Field(default=None, max_length=200)
    start_date: date = Field(nullable=False)
    end_date: date | None = Field(default=None)
    description: str | None = Field(default=None, max_length=2000)


# ── Pydantic schemas ─────────────────────────────────────────

class EducationCreate(SQLModel):
    institution: str = Field(min_length=1, max_length=200)
    degree: str = Field(min_length=1, max_length=200)
    field_of_study: str | None = Field(default=None, max_length=200)
    start_date: date
    end_date: date | None = None
    description: str | None = Field(default=None, max_length=2000)


class EducationUpdate(SQLModel):
    institution: str | None = Field(default=None, min_length=1, max_length=200)
    degree: str | None = Field(default=None, min_length=1, max_length=200)
    field_of_study: str | None = Field(default=None, max_length=200)
    start_date: date | None = None
    end_date: date | None = None
    description: str | None = Field(default=None, max_length=2000)


class EducationRead(SQLModel):
    id: uuid.UUID
    institution: str
    degree: str
    field_of_study: str | None
    start_date: date
    end_date: date | None
    description: str | None
