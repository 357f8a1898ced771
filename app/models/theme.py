"""PortfolioTheme model — one visual theme per portfolio."""

import uuid
from datetime import datetime
from enum import StrEnum

from sqlmodel import Field, SQLModel

from app.models.base import TimestampMixin, new_uuid
from app.models.portfolio import HexColor


class ThemeLayout(StrEnum):
    GRID = "grid"
    TIMELINE = "timeline"
    CARDS = "cards"


class PortfolioTheme(TimestampMixin, SQLModel, table=True):
    __tablename__ = "portfolio_themes"

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    portfolio_id: uuid.UUID = Field(
        foreign_key="portfolios.id", nullable=False, unique=True, index=True
    )

    layout: ThemeLayout = Field(default=ThemeLayout.GRID)
    primary_color: str = Field(default="#3b82f6", max_length=7)
    secondary_color: str = Field(default="#10b981", max_length=7)
    background_color: str = Field(default="#ffffff", max_length=7)
    font_family: str = Field(default="Inter", max_length=50)
    background_image: str | None = Field(default=None, max_length=1000)
    custom_css: str | None = Field(default=None)


# ── Pydantic schemas ─────────────────────────────────────────

class ThemeUpdate(SQLModel):
    layout: ThemeLayout
    primary_color: HexColor
    secondary_color: HexColor
    background_color: HexColor
    font_family: str = Field(max_length=50)
    background_image: str | None = Field(default=None, max_length=1000)
    custom_css: str | None = Field(default=None, max_length=20000)


class ThemeRead(SQLModel):
    portfolio_id: uuid.UUID
    layout: ThemeLayout
    primary_color: str
    secondary_color: str
    background_color: str
    font_family: str
    background_image: str | None
    custom_css: str | None
    updated_at: datetime
