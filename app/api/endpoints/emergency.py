# app/api/endpoints/emergency.py

from fastapi import APIRouter, Depends, status

from app.api.deps import get_current_principal, get_store
from app.core.permissions import Permission
from app.core.rbac import require_permission
from app.schemas.auth import Principal
from app.schemas.records import EmergencyAlertCreate
from app.services import record_service
from app.services.document_store import DocumentStore, Filter

router = APIRouter(prefix="/api/emergency-alerts", tags=["Emergency"])


# every signed-in role sees open alerts
@router.get("/")
async def active_alerts(
    store: DocumentStore = Depends(get_store),
    _: Principal = Depends(get_current_principal),
):
    return await store.get_documents(
        "emergencyAlerts", [Filter("isResolved", "==", False)], order_by="createdAt"
    )


@router.post("/", status_code=status.HTTP_201_CREATED)
async def trigger_alert(
    data: EmergencyAlertCreate,
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(require_permission(Permission.EmergencyTrigger)),
):
    return await record_service.trigger_emergency(store, principal, data)


@router.patch("/{alert_id}/resolve")
async def resolve_alert(
    alert_id: str,
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(require_permission(Permission.EmergencyManage)),
):
    return await record_service.resolve_emergency(store, principal, alert_id)
