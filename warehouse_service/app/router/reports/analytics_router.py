# app/router/reports/analytics_router.py
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import allow_manager, validate_current_token
from ...schemas.reports.analytics_schemas import (
    AnalyticsParams, DepartmentConsumptionRow, FastMovingRow, MostOrderedRow,
    PriceVariationRow, UserRequestsRow)
from ...crud.reports import analytics_crud as crud

router = APIRouter(prefix="/api/analytics", tags=["analytics"],
                   dependencies=[Depends(validate_current_token)])


@router.get("/fastest-moving", response_model=List[FastMovingRow])
def fastest_moving_items(
    params: AnalyticsParams = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.get_fastest_moving_items(db, params)


@router.get("/most-ordered", response_model=List[MostOrderedRow])
def most_ordered_items(
    params: AnalyticsParams = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.get_most_ordered_items(db, params)


@router.get("/department-consumption", response_model=List[DepartmentConsumptionRow])
def department_consumption(
    params: AnalyticsParams = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.get_department_consumption(db, params)


@router.get("/user-requests", response_model=List[UserRequestsRow])
def user_request_stats(
    params: AnalyticsParams = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.get_user_request_stats(db, params)


@router.get("/price-variation", response_model=List[PriceVariationRow])
def price_variation(
    params: AnalyticsParams = Depends(),
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.get_price_variation(db, params)
