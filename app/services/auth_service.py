# app/services/auth_service.py

from typing import Callable, Optional

from loguru import logger
from sqlmodel import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from app.core.config import settings
from app.core.security import (
    hash_password,
    verify_password,
    create_access_token,
)
from app.models.user import User, UserRole
from app.schemas.auth import AuthIdentity, TokenWithUser
from app.schemas.user import UserRead
from app.services.document_store import DocumentStore, to_document


# ============================================================================
# FETCH USER BY EMAIL
# ============================================================================
async def get_user_by_email(session: AsyncSession, email: str) -> User | None:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


# ============================================================================
# CREATE USER
# ============================================================================
async def create_user(
    store: DocumentStore,
    name: str,
    email: str,
    password: str,
    role: UserRole = UserRole.Student,
    uid: str | None = None,
) -> dict:
    data = {
        "name": name,
        "email": email,
        "password_hash": hash_password(password),
        "role": role,
        "isActive": True,
    }
    if uid:
        data["id"] = uid

    try:
        user = await store.add_document("users", data)
    except IntegrityError:
        raise ValueError("User with this email already exists")

    logger.info("Created {} account {}", UserRole(role).name, email)
    return user


# ============================================================================
# AUTHENTICATE (email + password)
# ============================================================================
async def authenticate_user(session: AsyncSession, email: str, password: str) -> User | None:
    user = await get_user_by_email(session, email)
    if not user or not user.password_hash:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user


# ============================================================================
# CREATE LOGIN RESPONSE
# ============================================================================
def create_login_response(user: User) -> TokenWithUser:
    token = create_access_token(
        subject=user.id,
        data={"email": user.email, "name": user.name},
    )
    return TokenWithUser(
        access_token=token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        user=UserRead.model_validate(to_document(user)),
    )


def identity_from_claims(payload: dict) -> AuthIdentity:
    return AuthIdentity(
        uid=str(payload["sub"]),
        email=payload.get("email"),
        display_name=payload.get("name"),
    )


# ============================================================================
# AUTH STATE CHANNEL
# ============================================================================
AuthCallback = Callable[[Optional[AuthIdentity]], None]


class AuthStateChannel:
    """
    Sign-in / sign-out events of one client session, in the shape of an
    identity provider's onAuthStateChanged.
    """

    def __init__(self):
        self._callbacks: list[AuthCallback] = []
        self.current: Optional[AuthIdentity] = None

    def on_auth_state_change(self, callback: AuthCallback) -> Callable[[], None]:
        self._callbacks.append(callback)

        def unsubscribe() -> None:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

        return unsubscribe

    def sign_in(self, identity: AuthIdentity) -> None:
        self.current = identity
        self._emit(identity)

    def sign_out(self) -> None:
        self.current = None
        self._emit(None)

    def _emit(self, identity: Optional[AuthIdentity]) -> None:
        for callback in list(self._callbacks):
            callback(identity)
