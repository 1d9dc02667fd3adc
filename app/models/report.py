# app/models/report.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Boolean, DateTime, String, Text
from datetime import datetime
from typing import Optional

from app.models.user import new_id
from app.models.enums import ReportStatus, Priority


class Report(SQLModel, table=True):
    __tablename__ = "reports"

    id: str = Field(default_factory=new_id, sa_column=Column(String(64), primary_key=True))

    # Bullying, Drogas, Vandalismo, Ameaca, Outro ...
    type: str = Field(nullable=False)
    title: str = Field(nullable=False)
    description: str = Field(sa_column=Column(Text, nullable=False))
    location: Optional[str] = None

    is_anonymous: bool = Field(default=False, sa_column=Column(Boolean, nullable=False, default=False))
    reporter_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True)
    )

    status: str = Field(default=ReportStatus.Pending.value, index=True)
    priority: str = Field(default=Priority.Medium.value)

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    resolved_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    resolved_by: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True)
    )
    resolution: Optional[str] = Field(default=None, sa_column=Column(Text, nullable=True))
