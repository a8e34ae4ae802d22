from enum import Enum


class SalesOrderStatus(str, Enum):
    DRAFT = "draft"
    WAITING_APPROVAL = "waiting_approval"
    APPROVED = "approved"
    PARTIAL_SHIPPED = "partial_shipped"
    CLOSED = "closed"


class DispatchStatus(str, Enum):
    DISPATCHED = "dispatched"
    DELIVERED = "delivered"


class NotificationStatus(str, Enum):
    UNREAD = "unread"
    READ = "read"


class NotificationPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
