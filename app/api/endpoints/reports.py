# app/api/endpoints/reports.py

from fastapi import APIRouter, Depends, status

from app.api.deps import get_store
from app.core.permissions import Permission
from app.core.rbac import require_permission
from app.schemas.auth import Principal
from app.schemas.records import ReportCreate, ReportStatusUpdate
from app.services import record_service
from app.services.document_store import DocumentStore, Filter

router = APIRouter(prefix="/api/reports", tags=["Reports"])


@router.get("/")
async def list_reports(
    store: DocumentStore = Depends(get_store),
    _: Principal = Depends(require_permission(Permission.ReportsViewAll)),
):
    return await store.get_documents("reports", order_by="createdAt")


@router.get("/mine")
async def my_reports(
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(require_permission(Permission.ReportsView)),
):
    return await store.get_documents(
        "reports", [Filter("reporterId", "==", principal.id)], order_by="createdAt"
    )


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_report(
    data: ReportCreate,
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(require_permission(Permission.ReportsCreate)),
):
    return await record_service.create_report(store, principal, data)


@router.patch("/{report_id}/status")
async def update_report_status(
    report_id: str,
    data: ReportStatusUpdate,
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(require_permission(Permission.ReportsManage)),
):
    return await record_service.update_report_status(store, principal, report_id, data)
