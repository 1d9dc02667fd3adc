# app/models/visitor.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Boolean, DateTime, String
from datetime import datetime
from typing import Optional

from app.models.user import new_id
from app.models.enums import VisitorStatus


class Visitor(SQLModel, table=True):
    __tablename__ = "visitors"

    id: str = Field(default_factory=new_id, sa_column=Column(String(64), primary_key=True))

    name: str = Field(nullable=False)
    document: str = Field(nullable=False)
    phone: Optional[str] = None
    purpose: str = Field(nullable=False)
    host_name: str = Field(nullable=False)
    host_id: Optional[str] = Field(
        default=None,
        sa_column=Column(String(64), nullable=True)
    )

    check_in_time: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    check_out_time: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    status: str = Field(default=VisitorStatus.CheckedIn.value)
    # mirrors status; the live visitor feed filters on it
    is_active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))

    badge_number: Optional[str] = None
    check_out_note: Optional[str] = None
    registered_by: str = Field(sa_column=Column(String(64), nullable=False))

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
