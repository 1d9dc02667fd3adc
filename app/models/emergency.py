# app/models/emergency.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Boolean, DateTime, String, Text
from datetime import datetime
from typing import Optional

from app.models.user import new_id
from app.models.enums import EmergencyType


class EmergencyAlert(SQLModel, table=True):
    __tablename__ = "emergency_alerts"

    id: str = Field(default_factory=new_id, sa_column=Column(String(64), primary_key=True))

    type: str = Field(default=EmergencyType.Other.value)
    message: str = Field(sa_column=Column(Text, nullable=False))
    location: Optional[str] = None
    triggered_by: str = Field(sa_column=Column(String(64), nullable=False))

    is_resolved: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    resolved_by: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True)
    )
    resolved_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
