from typing import Optional
from uuid import UUID
from sqlalchemy.orm import Session

from shared.core.schemas import UserToken
from ..models.masters.warehouses import Warehouse


def manages_warehouse(db: Session, user: UserToken, warehouse_id: Optional[UUID],
                      warehouse: Optional[Warehouse] = None) -> bool:
    """Admins manage everything; otherwise the warehouse manager or its assigned staff."""
    if user.is_admin:
        return True
    if warehouse_id is None:
        return False
    if user.warehouse_id is not None and user.warehouse_id == warehouse_id:
        return True

    if warehouse is None:
        warehouse = db.query(Warehouse).filter(Warehouse.id == warehouse_id).first()
    return bool(warehouse and warehouse.manager_id == user.user_id)
