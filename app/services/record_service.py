# app/services/record_service.py

from datetime import datetime, timezone
from typing import Optional

from loguru import logger

from app.models.enums import ReportStatus, VisitorStatus
from app.models.user import UserRole
from app.schemas.auth import Principal
from app.schemas.records import (
    CampaignCreate,
    CampaignUpdate,
    ChecklistItemCreate,
    ChecklistItemUpdate,
    DrillCreate,
    EmergencyAlertCreate,
    NoticeCreate,
    NoticeUpdate,
    ReportCreate,
    ReportStatusUpdate,
    VisitorCreate,
    VisitorCheckout,
)
from app.services.document_store import DocumentStore


def _utc_naive(value: Optional[datetime]) -> Optional[datetime]:
    # stored as naive UTC everywhere
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


# ============================================================================
# REPORTS
# ============================================================================
async def create_report(store: DocumentStore, principal: Principal, data: ReportCreate) -> dict:
    fields = data.to_fields()
    fields["reporterId"] = None if data.is_anonymous else principal.id
    fields["status"] = ReportStatus.Pending.value
    report = await store.add_document("reports", fields)
    logger.info("Report {} filed ({})", report["id"], "anonymous" if data.is_anonymous else principal.id)
    return report


async def update_report_status(
    store: DocumentStore, principal: Principal, report_id: str, data: ReportStatusUpdate
) -> dict:
    fields = {"status": data.status}
    if data.status == ReportStatus.Resolved.value:
        fields.update(
            resolvedAt=datetime.utcnow(),
            resolvedBy=principal.id,
            resolution=data.resolution,
        )
    report = await store.update_document("reports", report_id, fields)
    logger.info("Report {} -> {} by {}", report_id, data.status, principal.id)
    return report


# ============================================================================
# VISITORS
# ============================================================================
async def register_visitor(store: DocumentStore, principal: Principal, data: VisitorCreate) -> dict:
    fields = data.to_fields()
    fields.update(
        registeredBy=principal.id,
        status=VisitorStatus.CheckedIn.value,
        isActive=True,
        checkInTime=datetime.utcnow(),
    )
    return await store.add_document("visitors", fields)


async def check_out_visitor(
    store: DocumentStore, principal: Principal, visitor_id: str, data: Optional[VisitorCheckout] = None
) -> dict:
    fields = {
        "status": VisitorStatus.CheckedOut.value,
        "isActive": False,
        "checkOutTime": datetime.utcnow(),
    }
    if data and data.check_out_note:
        fields["checkOutNote"] = data.check_out_note
    visitor = await store.update_document("visitors", visitor_id, fields)
    logger.info("Visitor {} checked out by {}", visitor_id, principal.id)
    return visitor


# ============================================================================
# NOTICES & CAMPAIGNS
# ============================================================================
async def create_notice(store: DocumentStore, principal: Principal, data: NoticeCreate) -> dict:
    fields = data.to_fields()
    fields.update(createdBy=principal.id, isActive=True, expiresAt=_utc_naive(data.expires_at))
    return await store.add_document("notices", fields)


async def update_notice(store: DocumentStore, notice_id: str, data: NoticeUpdate) -> dict:
    fields = data.to_fields(partial=True)
    if "expiresAt" in fields:
        fields["expiresAt"] = _utc_naive(fields["expiresAt"])
    return await store.update_document("notices", notice_id, fields)


def notice_visible_to(notice: dict, role: UserRole) -> bool:
    audience = notice.get("targetAudience") or []
    return not audience or role.value in audience


async def create_campaign(store: DocumentStore, principal: Principal, data: CampaignCreate) -> dict:
    fields = data.to_fields()
    fields.update(createdBy=principal.id, isActive=True)
    return await store.add_document("campaigns", fields)


async def update_campaign(store: DocumentStore, campaign_id: str, data: CampaignUpdate) -> dict:
    return await store.update_document("campaigns", campaign_id, data.to_fields(partial=True))


# ============================================================================
# EMERGENCY ALERTS
# ============================================================================
async def trigger_emergency(store: DocumentStore, principal: Principal, data: EmergencyAlertCreate) -> dict:
    fields = data.to_fields()
    fields.update(triggeredBy=principal.id, isResolved=False)
    alert = await store.add_document("emergencyAlerts", fields)
    logger.warning("EMERGENCY {} triggered by {}: {}", data.type, principal.id, data.message)
    return alert


async def resolve_emergency(store: DocumentStore, principal: Principal, alert_id: str) -> dict:
    alert = await store.update_document(
        "emergencyAlerts",
        alert_id,
        {"isResolved": True, "resolvedBy": principal.id, "resolvedAt": datetime.utcnow()},
    )
    logger.info("Emergency {} resolved by {}", alert_id, principal.id)
    return alert


# ============================================================================
# CHECKLIST & DRILLS
# ============================================================================
async def create_checklist_item(store: DocumentStore, data: ChecklistItemCreate) -> dict:
    return await store.add_document("checklistItems", data.to_fields())


async def update_checklist_item(
    store: DocumentStore, principal: Principal, item_id: str, data: ChecklistItemUpdate
) -> dict:
    fields = data.to_fields(partial=True)
    if data.is_completed is True:
        fields.update(completedBy=principal.id, completedAt=datetime.utcnow())
    elif data.is_completed is False:
        fields.update(completedBy=None, completedAt=None)
    return await store.update_document("checklistItems", item_id, fields)


async def schedule_drill(store: DocumentStore, principal: Principal, data: DrillCreate) -> dict:
    fields = data.to_fields()
    fields.update(createdBy=principal.id, scheduledDate=_utc_naive(data.scheduled_date))
    return await store.add_document("drills", fields)


# ============================================================================
# USERS
# ============================================================================
async def set_user_active(store: DocumentStore, principal: Principal, user_id: str, is_active: bool) -> dict:
    if user_id == principal.id and not is_active:
        raise ValueError("You cannot deactivate your own account")
    user = await store.update_document("users", user_id, {"isActive": is_active})
    logger.info("User {} {} by {}", user_id, "activated" if is_active else "deactivated", principal.id)
    return user
