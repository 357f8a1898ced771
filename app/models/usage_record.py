"""AIUsageRecord model — one append-only row per accepted AI request."""

import uuid
from datetime import datetime

from sqlalchemy import Index
from sqlmodel import Field, SQLModel

from app.models.base import utcnow, new_uuid


class AIUsageRecord(SQLModel, table=True):
    __tablename__ = "ai_usage_records"
    # The hourly quota query filters on both columns.
    __table_args__ = (Index("ix_ai_usage_records_user_created", "user_id", "created_at"),)

    id: uuid.UUID = Field(default_factory=new_uuid, primary_key=True)
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False)

    request_type: str = Field(max_length=50, nullable=False)
    prompt_length: int = Field(default=0)
    response_length: int = Field(default=0)
    model: str = Field(max_length=100, nullable=False)

    created_at: datetime = Field(default_factory=utcnow, nullable=False)
