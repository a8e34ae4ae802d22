from enum import Enum


class RequestStatus(str, Enum):
    PENDING = "pending"
    PENDING_TRANSFER = "pending-transfer"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class RequestPriority(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class ApprovalLevel(str, Enum):
    MANAGER = "manager"
    ADMIN = "admin"


class ApprovalStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ApprovalAction(str, Enum):
    APPROVE = "approve"
    REJECT = "reject"


class TransferNotificationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    TRANSFERRED = "transferred"
