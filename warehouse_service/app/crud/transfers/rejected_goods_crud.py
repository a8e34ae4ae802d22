# app/crud/transfers/rejected_goods_crud.py
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session, joinedload

from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response, forbidden, not_found
from shared.utils.app_status_code import AppStatusCode
from ...enum.transfer_enum import RejectedGoodsStatus, TransferStatus
from ...helpers.access_helper import manages_warehouse
from ...models.transfers.rejected_goods import RejectedGoods
from ...schemas.transfers.transfers_schemas import RejectedGoodsOut, RejectedGoodsUpdate

# while the transfer return is open its actions own the goods status
RETURN_OPEN = (
    TransferStatus.RETURN_REQUESTED.value,
    TransferStatus.RETURN_APPROVED.value,
    TransferStatus.RETURN_SHIPPED.value,
)


def to_rejected_goods_out(row: RejectedGoods) -> RejectedGoodsOut:
    return RejectedGoodsOut(
        id=row.id,
        transfer_id=row.transfer_id,
        transfer_code=row.transfer.transfer_code if row.transfer else None,
        item_id=row.item_id,
        item_name=row.item.name if row.item else None,
        sku=row.item.sku if row.item else None,
        quantity=row.quantity,
        rejection_reason=row.rejection_reason,
        rejected_by=row.rejected_by,
        warehouse_id=row.warehouse_id,
        warehouse_name=row.warehouse.name if row.warehouse else None,
        status=row.status,
        notes=row.notes,
        rejected_at=row.rejected_at,
    )


def get_rejected_goods(db: Session, warehouse_id: Optional[UUID] = None) -> List[RejectedGoodsOut]:
    query = db.query(RejectedGoods).options(
        joinedload(RejectedGoods.transfer),
        joinedload(RejectedGoods.item),
        joinedload(RejectedGoods.warehouse),
    )
    if warehouse_id:
        query = query.filter(RejectedGoods.warehouse_id == warehouse_id)
    return [to_rejected_goods_out(row) for row in query.order_by(RejectedGoods.rejected_at.desc()).all()]


def update_rejected_goods(db: Session, rejected_id: UUID, payload: RejectedGoodsUpdate,
                          current_user: UserToken) -> RejectedGoodsOut:
    row = db.query(RejectedGoods).filter(RejectedGoods.id == rejected_id).first()
    if not row:
        return not_found("Rejected goods record")
    if not manages_warehouse(db, current_user, row.warehouse_id):
        return forbidden("You do not manage the warehouse holding these goods")

    data = payload.model_dump(exclude_unset=True, exclude_none=True)
    new_status = data.get("status")
    if new_status is not None and new_status.value != row.status:
        if row.transfer and row.transfer.status in RETURN_OPEN:
            return error_response(
                message=f"Goods of transfer {row.transfer.transfer_code} follow its return; "
                        "use approve-disposal or return-delivery",
                status_code=AppStatusCode.INVALID_STATUS_TRANSITION
            )
        if row.status != RejectedGoodsStatus.REJECTED.value:
            return error_response(
                message=f"Goods already {row.status} cannot change status",
                status_code=AppStatusCode.INVALID_STATUS_TRANSITION
            )
        row.status = new_status.value
    if "notes" in data:
        row.notes = data["notes"]

    db.commit()
    db.refresh(row)
    return to_rejected_goods_out(row)
