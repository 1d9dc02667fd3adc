# app/models/notice.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import JSON, Boolean, DateTime, String, Text
from datetime import datetime
from typing import List, Optional

from app.models.user import new_id
from app.models.enums import Priority


class Notice(SQLModel, table=True):
    __tablename__ = "notices"

    id: str = Field(default_factory=new_id, sa_column=Column(String(64), primary_key=True))

    title: str = Field(nullable=False)
    content: str = Field(sa_column=Column(Text, nullable=False))
    priority: str = Field(default=Priority.Medium.value)

    # role values: ["aluno", "funcionario", "direcao"]
    target_audience: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))

    is_active: bool = Field(default=True, sa_column=Column(Boolean, nullable=False, default=True))
    expires_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
    created_by: str = Field(sa_column=Column(String(64), nullable=False))

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: Optional[datetime] = Field(default=None, sa_column=Column(DateTime(timezone=True), nullable=True))
