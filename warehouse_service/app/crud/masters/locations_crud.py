# app/crud/masters/locations_crud.py
from typing import List
from uuid import UUID
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import error_response, not_found
from shared.utils.app_status_code import AppStatusCode
from ...models.masters.locations import Location
from ...schemas.masters.locations_schemas import LocationCreate, LocationOut, LocationUpdate


def get_locations(db: Session) -> List[Location]:
    return db.query(Location).order_by(Location.name.asc()).all()


def get_location_or_404(db: Session, location_id: UUID) -> Location:
    location = db.query(Location).filter(Location.id == location_id).first()
    if not location:
        return not_found("Location")
    return location


def _ensure_unique_name(db: Session, name: str, exclude_id: UUID = None):
    query = db.query(Location).filter(Location.name == name)
    if exclude_id:
        query = query.filter(Location.id != exclude_id)
    if query.first():
        return error_response(
            message="Location already exists",
            status_code=AppStatusCode.DUPLICATE_ADD_ERROR
        )


def create_location(db: Session, payload: LocationCreate) -> Location:
    _ensure_unique_name(db, payload.name)
    location = Location(**payload.model_dump())
    db.add(location)
    db.commit()
    db.refresh(location)
    return location


def update_location(db: Session, location_id: UUID, payload: LocationUpdate) -> Location:
    location = get_location_or_404(db, location_id)

    data = payload.model_dump(exclude_unset=True)
    if data.get("name"):
        _ensure_unique_name(db, data["name"], exclude_id=location_id)

    for key, value in data.items():
        setattr(location, key, value)

    db.commit()
    db.refresh(location)
    return location


def delete_location(db: Session, location_id: UUID) -> LocationOut:
    location = get_location_or_404(db, location_id)
    out = LocationOut.model_validate(location)
    db.delete(location)
    db.commit()
    return out
