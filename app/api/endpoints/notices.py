# app/api/endpoints/notices.py

from fastapi import APIRouter, Depends, status

from app.api.deps import get_store
from app.core.permissions import Permission
from app.core.rbac import require_permission
from app.schemas.auth import Principal
from app.schemas.records import NoticeCreate, NoticeUpdate
from app.services import record_service
from app.services.document_store import DocumentStore, Filter

router = APIRouter(prefix="/api/notices", tags=["Notices"])


@router.get("/")
async def active_notices(
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(require_permission(Permission.NoticesView)),
):
    notices = await store.get_documents(
        "notices", [Filter("isActive", "==", True)], order_by="createdAt"
    )
    return [n for n in notices if record_service.notice_visible_to(n, principal.role)]


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_notice(
    data: NoticeCreate,
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(require_permission(Permission.NoticesCreate)),
):
    return await record_service.create_notice(store, principal, data)


@router.patch("/{notice_id}")
async def update_notice(
    notice_id: str,
    data: NoticeUpdate,
    store: DocumentStore = Depends(get_store),
    _: Principal = Depends(require_permission(Permission.NoticesManage)),
):
    return await record_service.update_notice(store, notice_id, data)
