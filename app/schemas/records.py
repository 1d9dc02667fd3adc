from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from app.models.enums import (
    CampaignCategory,
    EmergencyType,
    Priority,
    ReportStatus,
)
from app.models.user import UserRole


class DocumentBody(BaseModel):
    """Request bodies use the same camelCase field names as the documents."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        use_enum_values = True
        validate_default = True

    def to_fields(self, partial: bool = False) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=partial)


# ---------------------------------------------------------
# REPORTS
# ---------------------------------------------------------
class ReportCreate(DocumentBody):
    type: str
    title: str
    description: str
    location: Optional[str] = None
    is_anonymous: bool = False
    priority: Priority = Priority.Medium


class ReportStatusUpdate(DocumentBody):
    status: ReportStatus
    resolution: Optional[str] = None


# ---------------------------------------------------------
# VISITORS
# ---------------------------------------------------------
class VisitorCreate(DocumentBody):
    name: str
    document: str
    purpose: str
    host_name: str
    phone: Optional[str] = None
    host_id: Optional[str] = None
    badge_number: Optional[str] = None


class VisitorCheckout(DocumentBody):
    check_out_note: Optional[str] = None


# ---------------------------------------------------------
# NOTICES
# ---------------------------------------------------------
class NoticeCreate(DocumentBody):
    title: str
    content: str
    priority: Priority = Priority.Medium
    target_audience: List[UserRole] = Field(default_factory=lambda: [role.value for role in UserRole])
    expires_at: Optional[datetime] = None


class NoticeUpdate(DocumentBody):
    title: Optional[str] = None
    content: Optional[str] = None
    priority: Optional[Priority] = None
    target_audience: Optional[List[UserRole]] = None
    is_active: Optional[bool] = None
    expires_at: Optional[datetime] = None


# ---------------------------------------------------------
# CAMPAIGNS
# ---------------------------------------------------------
class CampaignCreate(DocumentBody):
    title: str
    content: str
    category: CampaignCategory = CampaignCategory.General


class CampaignUpdate(DocumentBody):
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[CampaignCategory] = None
    is_active: Optional[bool] = None


# ---------------------------------------------------------
# EMERGENCY ALERTS
# ---------------------------------------------------------
class EmergencyAlertCreate(DocumentBody):
    message: str
    type: EmergencyType = EmergencyType.Other
    location: Optional[str] = None


# ---------------------------------------------------------
# CHECKLIST
# ---------------------------------------------------------
class ChecklistItemCreate(DocumentBody):
    title: str
    description: Optional[str] = None


class ChecklistItemUpdate(DocumentBody):
    title: Optional[str] = None
    description: Optional[str] = None
    is_completed: Optional[bool] = None


# ---------------------------------------------------------
# DRILLS
# ---------------------------------------------------------
class DrillCreate(DocumentBody):
    title: str
    scheduled_date: datetime
    description: Optional[str] = None
    type: str = "evacuation"
