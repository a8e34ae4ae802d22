# app/router/sales/sales_orders_router.py
from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import allow_manager, validate_current_token
from ...schemas.sales.clients_schemas import NextCodeOut
from ...schemas.sales.sales_orders_schemas import (
    DispatchCreate, DispatchOut, SalesOrderCreate, SalesOrderDecision, SalesOrderDetailOut,
    SalesOrderOut, SalesOrderRequest, SalesOrderUpdate)
from ...crud.sales import sales_orders_crud as crud

router = APIRouter(prefix="/api", tags=["sales orders"],
                   dependencies=[Depends(validate_current_token)])


def _pdf(content: bytes, filename: str) -> Response:
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/sales-orders", response_model=List[SalesOrderOut])
def read_sales_orders(
    params: SalesOrderRequest = Depends(),
    db: Session = Depends(get_db)
):
    return crud.get_sales_orders(db, params)


@router.get("/sales-orders/next-code", response_model=NextCodeOut)
def read_next_code(db: Session = Depends(get_db)):
    return NextCodeOut(code=crud.next_order_code(db))


@router.get("/sales-orders/pending-approvals", response_model=List[SalesOrderOut])
def read_pending_approvals(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.get_pending_order_approvals(db, current_user)


@router.get("/sales-orders/{order_id}", response_model=SalesOrderDetailOut)
def read_sales_order(order_id: UUID, db: Session = Depends(get_db)):
    return crud.get_sales_order(db, order_id)


@router.post("/sales-orders", response_model=SalesOrderDetailOut)
def create_sales_order(
    payload: SalesOrderCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.create_sales_order(db, payload, current_user)


@router.patch("/sales-orders/{order_id}", response_model=SalesOrderDetailOut)
def update_sales_order(
    order_id: UUID,
    payload: SalesOrderUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.update_sales_order(db, order_id, payload, current_user)


@router.post("/sales-orders/{order_id}/submit", response_model=SalesOrderDetailOut)
def submit_sales_order(
    order_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.submit_sales_order(db, order_id, current_user)


@router.post("/sales-orders/{order_id}/approve", response_model=SalesOrderDetailOut)
def approve_sales_order(
    order_id: UUID,
    payload: Optional[SalesOrderDecision] = None,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.approve_sales_order(db, order_id, current_user,
                                    payload.comments if payload else None)


@router.post("/sales-orders/{order_id}/reject", response_model=SalesOrderDetailOut)
def reject_sales_order(
    order_id: UUID,
    payload: Optional[SalesOrderDecision] = None,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.reject_sales_order(db, order_id, current_user,
                                   payload.comments if payload else None)


@router.post("/sales-orders/{order_id}/dispatch", response_model=DispatchOut)
def dispatch_sales_order(
    order_id: UUID,
    payload: DispatchCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.dispatch_sales_order(db, order_id, payload, current_user)


@router.delete("/sales-orders/{order_id}", response_model=SalesOrderOut)
def delete_sales_order(
    order_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.delete_sales_order(db, order_id, current_user)


@router.get("/sales-orders/{order_id}/pdf")
def sales_order_pdf(order_id: UUID, db: Session = Depends(get_db)):
    order = crud.get_order_or_404(db, order_id)
    return _pdf(crud.sales_order_pdf(db, order_id), f"{order.order_code}.pdf")


@router.patch("/dispatches/{dispatch_id}/deliver", response_model=DispatchOut)
def deliver_dispatch(
    dispatch_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.deliver_dispatch(db, dispatch_id)


@router.get("/dispatches/{dispatch_id}/challan")
def dispatch_challan(dispatch_id: UUID, db: Session = Depends(get_db)):
    return _pdf(crud.dispatch_challan_pdf(db, dispatch_id), f"challan_{dispatch_id}.pdf")
