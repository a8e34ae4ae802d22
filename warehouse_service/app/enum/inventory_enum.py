from enum import Enum


class WarehouseStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"


class ItemStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class TransactionType(str, Enum):
    CHECK_IN = "check-in"
    CHECK_OUT = "check-out"
    ISSUE = "issue"
    TRANSFER = "transfer"
    DISPOSAL = "disposal"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    IN_TRANSIT = "in-transit"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ValuationMethod(str, Enum):
    LAST_VALUE = "Last Value"
    EARLIEST_VALUE = "Earliest Value"
    AVERAGE_VALUE = "Average Value"


class LowStockStatus(str, Enum):
    CRITICAL = "critical"
    LOW = "low"
    WARNING = "warning"
