from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr
from pydantic.alias_generators import to_camel

from app.models.user import UserRole


# ---------------------------------------------------------
# CREATE USER (Direction creates any user)
# ---------------------------------------------------------
class UserCreate(BaseModel):
    name: str
    email: EmailStr
    password: str
    role: UserRole = UserRole.Student


# ---------------------------------------------------------
# UPDATE USER (own profile, role only by Direction)
# ---------------------------------------------------------
class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    role: Optional[UserRole] = None


class UserActiveUpdate(BaseModel):
    is_active: bool

    class Config:
        alias_generator = to_camel
        populate_by_name = True


# ---------------------------------------------------------
# READ USER (document shape)
# ---------------------------------------------------------
class UserRead(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    is_active: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True
