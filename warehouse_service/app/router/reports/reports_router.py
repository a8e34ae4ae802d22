# app/router/reports/reports_router.py
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.auth import validate_current_token
from ...schemas.reports.reports_schemas import (
    LowStockParams, LowStockRow, MovementReportParams, StockReportRow, ValuationReport)
from ...schemas.stock.transactions_schemas import TransactionOut
from ...crud.reports import reports_crud as crud

router = APIRouter(prefix="/api/reports", tags=["reports"],
                   dependencies=[Depends(validate_current_token)])


@router.get("/inventory-stock", response_model=List[StockReportRow])
def inventory_stock_report(db: Session = Depends(get_db)):
    return crud.get_stock_report(db)


@router.get("/inventory-movement", response_model=List[TransactionOut])
def inventory_movement_report(
    params: MovementReportParams = Depends(),
    db: Session = Depends(get_db)
):
    return crud.get_movement_report(db, params)


@router.get("/low-stock", response_model=List[LowStockRow])
def low_stock_report(
    params: LowStockParams = Depends(),
    db: Session = Depends(get_db)
):
    return crud.get_low_stock_report(db, params)


@router.get("/inventory-valuation", response_model=ValuationReport)
def inventory_valuation_report(
    as_of_date: Optional[date] = None,
    db: Session = Depends(get_db)
):
    return crud.get_inventory_valuation(db, as_of_date)
