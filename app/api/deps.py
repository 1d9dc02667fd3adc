# app/api/deps.py

from typing import AsyncGenerator

import jwt
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import decode_token
from app.core.database import get_session
from app.schemas.auth import Principal, ResolutionStatus
from app.services.auth_service import identity_from_claims
from app.services.document_store import DocumentStore
from app.services.identity_service import IdentityResolver


# ------------------------------------------------------------
# HTTP Bearer Authentication
# ------------------------------------------------------------
bearer_scheme = HTTPBearer(auto_error=False)


# ------------------------------------------------------------
# DB Session / Store / Resolver
# ------------------------------------------------------------
async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    async for session in get_session():
        yield session


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_resolver(request: Request) -> IdentityResolver:
    return request.app.state.resolver


# ------------------------------------------------------------
# Current principal from JWT
# ------------------------------------------------------------
async def get_current_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    resolver: IdentityResolver = Depends(get_resolver),
) -> Principal:
    if credentials is None:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Not authenticated")

    try:
        payload = decode_token(credentials.credentials)
        identity = identity_from_claims(payload)
    except (jwt.PyJWTError, KeyError):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Could not validate credentials")

    resolution = await resolver.resolve(identity)

    if resolution.status == ResolutionStatus.Deactivated:
        raise HTTPException(status.HTTP_403_FORBIDDEN, "Account deactivated")
    if resolution.principal is None:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "User not found")

    return resolution.principal
