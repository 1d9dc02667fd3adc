from enum import Enum


class ReportStatus(str, Enum):
    Pending = "pending"
    Open = "open"
    InProgress = "in_progress"
    Reviewed = "reviewed"
    Resolved = "resolved"
    Rejected = "rejected"


class Priority(str, Enum):
    Low = "low"
    Medium = "medium"
    High = "high"
    Urgent = "urgent"


class VisitorStatus(str, Enum):
    CheckedIn = "checked_in"
    CheckedOut = "checked_out"


class CampaignCategory(str, Enum):
    DigitalSafety = "digital_safety"
    TrafficEducation = "traffic_education"
    AntiBullying = "anti_bullying"
    General = "general"


class EmergencyType(str, Enum):
    Fire = "fire"
    Evacuation = "evacuation"
    Lockdown = "lockdown"
    Medical = "medical"
    Security = "security"
    Weather = "weather"
    Other = "other"


# statuses counted as "pending" on the dashboard
PENDING_REPORT_STATUSES = frozenset({ReportStatus.Pending.value, ReportStatus.Open.value})
