# app/models/user.py

from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Boolean, DateTime, String
from sqlalchemy import Enum as PGEnum
from datetime import datetime
import uuid
from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    Student = "aluno"
    Staff = "funcionario"
    Direction = "direcao"


def new_id() -> str:
    return str(uuid.uuid4())


class User(SQLModel, table=True):
    __tablename__ = "users"

    # same value as the identity provider uid
    id: str = Field(
        default_factory=new_id,
        sa_column=Column(String(64), primary_key=True)
    )

    name: str = Field(nullable=False)
    email: str = Field(nullable=False, index=True, unique=True)
    password_hash: Optional[str] = Field(
        default=None,
        sa_column=Column(String, nullable=True)
    )

    # stored by value ("aluno", ...) so the documents match the clients
    role: UserRole = Field(
        default=UserRole.Student,
        sa_column=Column(
            PGEnum(UserRole, name="user_role", values_callable=lambda e: [m.value for m in e]),
            nullable=False,
        )
    )

    is_active: bool = Field(
        default=True,
        sa_column=Column(Boolean, nullable=False, default=True)
    )

    created_at: datetime = Field(
        default_factory=datetime.utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False)
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=True)
    )
