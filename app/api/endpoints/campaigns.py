# app/api/endpoints/campaigns.py

from fastapi import APIRouter, Depends, status

from app.api.deps import get_store
from app.core.permissions import Permission
from app.core.rbac import require_permission
from app.schemas.auth import Principal
from app.schemas.records import CampaignCreate, CampaignUpdate
from app.services import record_service
from app.services.document_store import DocumentStore, Filter

router = APIRouter(prefix="/api/campaigns", tags=["Campaigns"])


@router.get("/")
async def active_campaigns(
    store: DocumentStore = Depends(get_store),
    _: Principal = Depends(require_permission(Permission.CampaignsView)),
):
    return await store.get_documents(
        "campaigns", [Filter("isActive", "==", True)], order_by="createdAt"
    )


@router.post("/", status_code=status.HTTP_201_CREATED)
async def create_campaign(
    data: CampaignCreate,
    store: DocumentStore = Depends(get_store),
    principal: Principal = Depends(require_permission(Permission.CampaignsManage)),
):
    return await record_service.create_campaign(store, principal, data)


@router.patch("/{campaign_id}")
async def update_campaign(
    campaign_id: str,
    data: CampaignUpdate,
    store: DocumentStore = Depends(get_store),
    _: Principal = Depends(require_permission(Permission.CampaignsManage)),
):
    return await record_service.update_campaign(store, campaign_id, data)
