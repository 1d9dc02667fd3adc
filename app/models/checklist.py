# app/models/checklist.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Boolean, DateTime, String, Text
from datetime import datetime
from typing import Optional

from app.models.user import new_id


class ChecklistItem(SQLModel, table=True):
    __tablename__ = "checklist_items"

    id: str = Field(default_factory=new_id, sa_column=Column(String(64), primary_key=True))

    title: str = Field(nullable=False)
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))

    is_completed: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    completed_by: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True)
    )
    completed_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
