# app/api/endpoints/visitors.py

from typing import Optional

from fastapi import APIRouter, Depends, status

from app.api.deps import get_store
from app.core.permissions import Permission
from app.core.rbac import require_permission
from app.schemas.auth import Principal
from app.schemas.records import VisitorCheckout, VisitorCreate
from app.services import record_service
from app.services.document_store import DocumentStore, Filter

router = APIRouter(prefix="/api/visitors", tags=["Visitors"])


@router.get("/")
async def list_visitors(
    store: DocumentStore = Depends(get_store),
    _: Principal = Depends(require_permission(Permission.VisitorsView)),
):
    return await store.get_documents("visitors", order_by="checkInTime")


@router.get("/active")
async def active_visitors(
    store: DocumentStore = Depends(get_store),
    _: Principal = Depends(require_permission(Permission.VisitorsView)),
):
    return await store.get_documents(
        "visitors", [Filter("isActive", "==", True)], order_by="checkInTime"
    )


@router.post("/", status_code=status.HTTP_201_CREATED)
async def register_visitor(
    data: VisitorCreate,
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(require_permission(Permission.VisitorsRegister)),
):
    return await record_service.register_visitor(store, principal, data)


@router.patch("/{visitor_id}/checkout")
async def check_out_visitor(
    visitor_id: str,
    data: Optional[VisitorCheckout] = None,
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(require_permission(Permission.VisitorsManage)),
):
    return await record_service.check_out_visitor(store, principal, visitor_id, data)
