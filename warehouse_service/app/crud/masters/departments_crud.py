# app/crud/masters/departments_crud.py
from typing import List
from uuid import UUID
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import error_response, not_found
from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from ...models.masters.departments import Department
from ...schemas.masters.departments_schemas import DepartmentCreate, DepartmentOut, DepartmentUpdate


def get_departments(db: Session) -> List[Department]:
    return db.query(Department).order_by(Department.name.asc()).all()


def _ensure_unique_name(db: Session, name: str, exclude_id: UUID = None):
    query = db.query(Department).filter(Department.name == name)
    if exclude_id:
        query = query.filter(Department.id != exclude_id)
    if query.first():
        return error_response(
            message="Department name already exists",
            status_code=AppStatusCode.DUPLICATE_ADD_ERROR
        )


def create_department(db: Session, payload: DepartmentCreate) -> Department:
    _ensure_unique_name(db, payload.name)
    department = Department(**payload.model_dump())
    db.add(department)
    db.commit()
    db.refresh(department)
    return department


def update_department(db: Session, department_id: UUID, payload: DepartmentUpdate) -> Department:
    department = db.query(Department).filter(Department.id == department_id).first()
    if not department:
        return not_found("Department")

    data = payload.model_dump(exclude_unset=True)
    if data.get("name"):
        _ensure_unique_name(db, data["name"], exclude_id=department_id)

    for key, value in data.items():
        setattr(department, key, value)

    db.commit()
    db.refresh(department)
    return department


def delete_department(db: Session, department_id: UUID) -> DepartmentOut:
    department = db.query(Department).filter(Department.id == department_id).first()
    if not department:
        return not_found("Department")

    in_use = db.query(Users).filter(
        Users.department_id == department_id, Users.is_deleted == False).count()
    if in_use:
        raise ValueError(f"Department has {in_use} users assigned and cannot be deleted")

    out = DepartmentOut.model_validate(department)
    db.delete(department)
    db.commit()
    return out
