# app/api/endpoints/checklist.py

from fastapi import APIRouter, Depends, status

from app.api.deps import get_store
from app.core.permissions import Permission
from app.core.rbac import require_permission
from app.schemas.auth import Principal
from app.schemas.records import ChecklistItemCreate, ChecklistItemUpdate
from app.services import record_service
from app.services.document_store import DocumentStore

router = APIRouter(prefix="/api/checklist", tags=["Checklist"])


@router.get("/")
async def list_items(
    store: DocumentStore = Depends(get_store),
    _: Principal = Depends(require_permission(Permission.ChecklistView)),
):
    return await store.get_documents("checklistItems", order_by="createdAt", descending=False)


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_item(
    data: ChecklistItemCreate,
    store: DocumentStore = Depends(get_store),
    _: Principal = Depends(require_permission(Permission.ChecklistManage)),
):
    return await record_service.create_checklist_item(store, data)


@router.patch("/{item_id}")
async def update_item(
    item_id: str,
    data: ChecklistItemUpdate,
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(require_permission(Permission.ChecklistComplete)),
):
    return await record_service.update_checklist_item(store, principal, item_id, data)
