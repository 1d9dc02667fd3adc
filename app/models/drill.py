# app/models/drill.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import DateTime, String, Text
from datetime import datetime
from typing import Optional

from app.models.user import new_id


class Drill(SQLModel, table=True):
    __tablename__ = "drills"

    id: str = Field(default_factory=new_id, sa_column=Column(String(64), primary_key=True))

    title: str = Field(nullable=False)
    description: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
    scheduled_date: datetime = Field(sa_column=Column(DateTime(timezone=True), nullable=False, index=True))
    # evacuation, fire, earthquake ...
    type: str = Field(default="evacuation")
    created_by: str = Field(sa_column=Column(String(64), nullable=False))

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
