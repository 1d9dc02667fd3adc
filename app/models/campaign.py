# app/models/campaign.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Boolean, DateTime, String, Text
from datetime import datetime
from typing import Optional

from app.models.user import new_id
from app.models.enums import CampaignCategory


class Campaign(SQLModel, table=True):
    __tablename__ = "campaigns"

    id: str = Field(default_factory=new_id, sa_column=Column(String(64), primary_key=True))

    title: str = Field(nullable=False)
    content: str = Field(sa_column=Column(Text, nullable=False))
    category: str = Field(default=CampaignCategory.General.value)
    is_active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))
    created_by: str = Field(sa_column=Column(String(64), nullable=False))

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
