# app/router/reports/export_router.py
from datetime import datetime
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.auth import validate_current_token
from shared.exporthelper import export_to_csv
from ...crud.reports import reports_crud as crud

router = APIRouter(prefix="/api/export", tags=["Export"],
                   dependencies=[Depends(validate_current_token)])


def _filename(prefix: str) -> str:
    return f"{prefix}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.csv"


@router.get("/transactions", response_class=StreamingResponse)
def export_transactions(db: Session = Depends(get_db)):
    return export_to_csv(
        crud.get_transactions_export_rows(db),
        filename=_filename("transactions"),
        column_map=crud.TRANSACTION_EXPORT_COLUMNS,
    )


@router.get("/inventory-stock", response_class=StreamingResponse)
def export_inventory_stock(db: Session = Depends(get_db)):
    return export_to_csv(
        crud.get_stock_export_rows(db),
        filename=_filename("inventory_stock"),
        column_map=crud.STOCK_EXPORT_COLUMNS,
    )
