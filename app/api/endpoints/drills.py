# app/api/endpoints/drills.py

from fastapi import APIRouter, Depends, status

from app.api.deps import get_store
from app.core.permissions import Permission
from app.core.rbac import require_permission
from app.schemas.auth import Principal
from app.schemas.records import DrillCreate
from app.services import record_service
from app.services.document_store import DocumentStore
from app.services.live_service import TRACKED

router = APIRouter(prefix="/api/drills", tags=["Drills"])


@router.get("/")
async def list_drills(
    store: DocumentStore = Depends(get_store),
    _: Principal = Depends(require_permission(Permission.DrillsView)),
):
    return await store.get_documents("drills", order_by="scheduledDate")


@router.get("/upcoming")
async def upcoming_drills(
    store: DocumentStore = Depends(get_store),
    _: Principal = Depends(require_permission(Permission.DrillsView)),
):
    return await store.get_documents(
        "drills", TRACKED["drills"](), order_by="scheduledDate", descending=False
    )


@router.post("/", status_code=status.HTTP_201_CREATED)
async def schedule_drill(
    data: DrillCreate,
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(require_permission(Permission.DrillsManage)),
):
    return await record_service.schedule_drill(store, principal, data)
