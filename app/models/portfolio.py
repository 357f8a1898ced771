"""Portfolio model — a published page owned by one user, addressed by slug."""

import uuid
from datetime import datetime
from typing import Annotated

from pydantic import StringConstraints
from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid

SLUG_PATTERN = r"^[a-z0-9\-]+$"
COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"

SlugStr = Annotated[str, StringConstraints(min_length=1, max_length=100, pattern=SLUG_PATTERN)]
HexColor = Annotated[str, StringConstraints(pattern=COLOR_PATTERN)]


class Portfolio(TimestampMixin, SQLModel, table=True):
    __tablename__ = "portfolios"
    # Slugs are unique per owner, never globally.
    __table_args__ = (UniqueConstraint("user_id", "slug", name="uq_portfolios_user_slug"),)

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)

    slug: str = Field(max_length=100, nullable=False, index=True)
    title: str = Field(max_length=100, nullable=False)
    subtitle: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=5000)

    is_published: bool = Field(default=False)
    view_count: int = Field(default=0)

    primary_color: str | None = Field(default=None, max_length=7)
    secondary_color: str | None = Field(default=None, max_length=7)
    font_family: str | None = Field(default=None, max_length=50)

    seo_title: str | None = Field(default=None, max_length=70)
    seo_description: str | None = Field(default=None, max_length=160)


# ── Pydantic schemas ─────────────────────────────────────────

class PortfolioCreate(SQLModel):
    title: str = Field(min_length=1, max_length=100)
    slug: SlugStr | None = Field(default=None, description="Omit to derive a slug from the title")
    subtitle: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    is_published: bool = False
    primary_color: HexColor | None = None
    secondary_color: HexColor | None = None
    font_family: str | None = Field(default=None, max_length=50)
    seo_title: str | None = Field(default=None, max_length=70)
    seo_description: str | None = Field(default=None, max_length=160)


class PortfolioUpdate(SQLModel):
    title: str | None = Field(default=None, min_length=1, max_length=100)
    slug: SlugStr | None = None
    regenerate_slug: bool = Field(
        default=False,
        description="Re-derive the slug from the (new) title",
    )
    subtitle: str | None = Field(default=None, max_length=200)
    description: str | None = Field(default=None, max_length=5000)
    is_published: bool | None = None
    primary_color: HexColor | None = None
    secondary_color: HexColor | None = None
    font_family: str | None = Field(default=None, max_length=50)
    seo_title: str | None = Field(default=None, max_length=70)
    seo_description: str | None = Field(default=None, max_length=160)


class PortfolioRead(SQLModel):
    id: uuid.UUID
    user_id: uuid.UUID
    slug: str
    title: str
    subtitle: str | None
    description: str | None
    is_published: bool
    view_count: int
    primary_color: str | None
    secondary_color: str | None
    font_family: str | None
    seo_title: str | None
    seo_description: str | None
    created_at: datetime
    updated_at: datetime


class SlugAvailability(SQLModel):
    slug: str
    available: bool
