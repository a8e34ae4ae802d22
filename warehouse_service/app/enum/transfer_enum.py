from enum import Enum


class TransferStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    IN_TRANSIT = "in-transit"
    COMPLETED = "completed"
    REJECTED = "rejected"
    RETURN_REQUESTED = "return_requested"
    RETURN_APPROVED = "return_approved"
    RETURN_SHIPPED = "return_shipped"
    RETURNED = "returned"
    DISPOSED = "disposed"


class TransferMode(str, Enum):
    COURIER = "courier"
    HANDOVER = "handover"
    PICKUP = "pickup"
    DISPOSAL = "disposal"


class TransferUpdateType(str, Enum):
    STATUS_CHANGE = "status_change"
    SHIPMENT_INFO = "shipment_info"
    RECEIPT_INFO = "receipt_info"
    NOTE = "note"


class ItemCondition(str, Enum):
    GOOD = "good"
    DAMAGED = "damaged"
    MISSING = "missing"


class RejectedGoodsStatus(str, Enum):
    REJECTED = "rejected"
    RETURNED = "returned"
    DISPOSED = "disposed"


class TransferActor(str, Enum):
    """Who may drive a transfer transition."""
    ADMIN = "admin"
    ANY_MANAGER = "any_manager"
    SOURCE_MANAGER = "source_manager"
    DESTINATION_MANAGER = "destination_manager"
