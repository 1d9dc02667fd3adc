from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, EmailStr

from app.models.user import UserRole
from app.schemas.user import UserRead


# -------------------------------------------------------------------
# LOGIN / REGISTER
# -------------------------------------------------------------------
class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    """Self sign-up. Every new account starts as a Student."""
    name: str
    email: EmailStr
    password: str

    class Config:
        json_schema_extra = {
            "examples": [
                {"name": "Ana Souza", "email": "ana@escola.com", "password": "password123"}
            ]
        }


class TokenWithUser(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    user: UserRead


# -------------------------------------------------------------------
# IDENTITY
# -------------------------------------------------------------------
class AuthIdentity(BaseModel):
    """What the authentication provider knows about a signed-in account."""
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None

    class Config:
        frozen = True


class Principal(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole
    is_active: bool = True

    class Config:
        frozen = True


class ResolutionStatus(str, Enum):
    Active = "active"
    Deactivated = "deactivated"
    MissingProfile = "missing_profile"
    Demo = "demo"
    Fallback = "fallback"
    SignedOut = "signed_out"


class Resolution(BaseModel):
    status: ResolutionStatus
    principal: Optional[Principal] = None


class PrincipalRead(BaseModel):
    principal: Principal
    permissions: List[str]
