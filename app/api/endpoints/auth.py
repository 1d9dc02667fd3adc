# app/api/endpoints/auth.py

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_current_principal, get_db_session, get_store
from app.core.permissions import permissions_for
from app.schemas.auth import LoginRequest, Principal, PrincipalRead, RegisterRequest, TokenWithUser
from app.schemas.user import UserRead
from app.services.auth_service import authenticate_user, create_login_response, create_user
from app.services.document_store import DocumentStore

router = APIRouter(prefix="/api/auth", tags=["Auth"])


# -------------------------------------------------------------------
# LOGIN
# -------------------------------------------------------------------
@router.post("/login", response_model=TokenWithUser)
async def login(
    payload: LoginRequest,
    session: AsyncSession = Depends(get_db_session)
):
    user = await authenticate_user(session, payload.email, payload.password)

    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account deactivated")

    return create_login_response(user)


# -------------------------------------------------------------------
# SELF REGISTRATION (always Student; Direction promotes later)
# -------------------------------------------------------------------
@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    store: DocumentStore = Depends(get_store),
):
    return await create_user(store, data.name, data.email, data.password)


# -------------------------------------------------------------------
# CURRENT PRINCIPAL
# -------------------------------------------------------------------
@router.get("/me", response_model=PrincipalRead)
async def me(principal: Principal = Depends(get_current_principal)):
    return PrincipalRead(
        principal=principal,
        permissions=sorted(p.value for p in permissions_for(principal)),
    )
