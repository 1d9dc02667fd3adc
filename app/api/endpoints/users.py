# app/api/endpoints/users.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.deps import get_current_principal, get_store
from app.core.permissions import Permission, has_permission
from app.core.rbac import require_permission
from app.schemas.auth import Principal
from app.schemas.user import UserActiveUpdate, UserCreate, UserRead, UserUpdate
from app.services.auth_service import create_user
from app.services.document_store import DocumentStore
from app.services.record_service import set_user_active

router = APIRouter(prefix="/api/users", tags=["Users"])


# -------------------------------------------------------------------
# List all users (Direction)
# -------------------------------------------------------------------
@router.get("/", response_model=List[UserRead])
async def list_users(
    store: DocumentStore = Depends(get_store),
    _: Principal = Depends(require_permission(Permission.UsersViewAll)),
):
    return await store.get_documents("users", order_by="createdAt")


# -------------------------------------------------------------------
# Create ANY user (Direction)
# -------------------------------------------------------------------
@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_new_user(
    data: UserCreate,
    store: DocumentStore = Depends(get_store),
    _: Principal = Depends(require_permission(Permission.UsersManage)),
):
    return await create_user(store, data.name, data.email, data.password, role=data.role)


# -------------------------------------------------------------------
# Get one user (self, Staff and Direction)
# -------------------------------------------------------------------
@router.get("/{user_id}", response_model=UserRead)
async def get_user(
    user_id: str,
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    if user_id != principal.id and not has_permission(principal, Permission.UsersView):
        raise HTTPException(status_code=403, detail=f"Access denied for role '{principal.role.value}'")

    user = await store.get_document("users", user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


# -------------------------------------------------------------------
# Update profile (own profile, or anyone with users:manage)
# -------------------------------------------------------------------
@router.patch("/{user_id}", response_model=UserRead)
async def update_user(
    user_id: str,
    data: UserUpdate,
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(get_current_principal),
):
    can_manage = has_permission(principal, Permission.UsersManage)

    if user_id != principal.id and not can_manage:
        raise HTTPException(status_code=403, detail="Forbidden: can only update own profile")

    # no role escalation
    if data.role is not None and not can_manage:
        raise HTTPException(status_code=403, detail="Forbidden: cannot change role")

    return await store.update_document("users", user_id, data.model_dump(exclude_unset=True))


# -------------------------------------------------------------------
# Activate / deactivate (Direction)
# -------------------------------------------------------------------
@router.patch("/{user_id}/active", response_model=UserRead)
async def toggle_user_active(
    user_id: str,
    data: UserActiveUpdate,
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(require_permission(Permission.UsersManage)),
):
    return await set_user_active(store, principal, user_id, data.is_active)
