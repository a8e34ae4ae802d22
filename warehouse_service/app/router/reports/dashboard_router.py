# app/router/reports/dashboard_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.auth import validate_current_token
from ...schemas.reports.reports_schemas import DashboardSummary
from ...crud.reports import reports_crud as crud

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"],
                   dependencies=[Depends(validate_current_token)])


@router.get("/summary", response_model=DashboardSummary)
def dashboard_summary(db: Session = Depends(get_db)):
    return crud.get_dashboard_summary(db)
