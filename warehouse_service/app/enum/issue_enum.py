from enum import Enum


class IssueCategory(str, Enum):
    INVENTORY = "inventory"
    EQUIPMENT = "equipment"
    SAFETY = "safety"
    QUALITY = "quality"
    PROCESS = "process"
    OTHER = "other"


class IssuePriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class IssueStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


class IssueAction(str, Enum):
    CREATED = "created"
    STATUS_CHANGED = "status_changed"
    CLOSED = "closed"
    REOPENED = "reopened"
