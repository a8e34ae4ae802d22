# app/router/masters/locations_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import allow_admin, validate_current_token
from ...schemas.masters.locations_schemas import LocationCreate, LocationOut, LocationUpdate
from ...crud.masters import locations_crud as crud

router = APIRouter(prefix="/api/locations", tags=["locations"],
                   dependencies=[Depends(validate_current_token)])


@router.get("", response_model=List[LocationOut])
def read_locations(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.get_locations(db)


@router.post("", response_model=LocationOut)
def create_location(
    payload: LocationCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.create_location(db, payload)


@router.put("/{location_id}", response_model=LocationOut)
def update_location(
    location_id: UUID,
    payload: LocationUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.update_location(db, location_id, payload)


@router.delete("/{location_id}", response_model=LocationOut)
def delete_location(
    location_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_admin)
):
    return crud.delete_location(db, location_id)
