from typing import Dict, Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class DashboardStats(BaseModel):
    total_reports: int = 0
    pending_reports: int = 0
    reports_by_status: Dict[str, int] = {}
    active_visitors: int = 0
    active_notices: int = 0
    active_campaigns: int = 0
    completed_checklist: int = 0
    total_checklist_items: int = 0
    upcoming_drills: int = 0
    loading: bool = False
    error: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
