# app/crud/masters/users_crud.py
import logging
from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session

from shared.core.auth import build_user_token, create_access_token
from shared.core.schemas import UserToken
from shared.helpers.json_response_helper import error_response, not_found
from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from shared.utils.enums import UserRole, UserStatus
from ...models.masters.departments import Department
from ...models.masters.warehouses import Warehouse
from ...schemas.masters.users_schemas import (
    LoginRequest, TokenResponse, UserCreate, UserOut, UserUpdate)

logger = logging.getLogger(__name__)


def get_user_by_id(db: Session, user_id: UUID) -> Optional[Users]:
    return db.query(Users).filter(Users.id == user_id, Users.is_deleted == False).first()


def get_user_or_404(db: Session, user_id: UUID) -> Users:
    user = get_user_by_id(db, user_id)
    if not user:
        return not_found("User")
    return user


# ---------------- Login ----------------

def login(db: Session, payload: LoginRequest) -> TokenResponse:
    user = db.query(Users).filter(
        Users.username == payload.username,
        Users.is_deleted == False
    ).first()

    if not user or not user.verify_password(payload.password):
        logger.warning("Failed login for username %s", payload.username)
        return error_response(
            message="Invalid username or password",
            status_code=AppStatusCode.AUTHENTICATION_CREDENTIALS_INVALID,
            http_status=401
        )

    if user.status != UserStatus.active.value:
        return error_response(
            message="User is not active. Access denied",
            status_code=AppStatusCode.AUTHENTICATION_USER_INACTIVE,
            http_status=403
        )

    token = create_access_token(build_user_token(user))
    return TokenResponse(access_token=token, user=UserOut.model_validate(user))


# ---------------- Queries ----------------

def get_users(db: Session) -> List[Users]:
    return db.query(Users).filter(Users.is_deleted == False).order_by(Users.name.asc()).all()


def get_active_users(db: Session) -> List[Users]:
    return (
        db.query(Users)
        .filter(Users.is_deleted == False, Users.status == UserStatus.active.value)
        .order_by(Users.name.asc())
        .all()
    )


def _validate_links(db: Session, manager_id=None, warehouse_id=None, department_id=None):
    if manager_id and not get_user_by_id(db, manager_id):
        raise ValueError("Manager not found")
    if warehouse_id and not db.query(Warehouse).filter(Warehouse.id == warehouse_id).first():
        raise ValueError("Warehouse not found")
    if department_id and not db.query(Department).filter(Department.id == department_id).first():
        raise ValueError("Department not found")


# ---------------- Mutations ----------------

def create_user(db: Session, payload: UserCreate) -> Users:
    if db.query(Users).filter(Users.username == payload.username).first():
        return error_response(
            message="Username already exists",
            status_code=AppStatusCode.DUPLICATE_ADD_ERROR
        )

    _validate_links(db, payload.manager_id, payload.warehouse_id, payload.department_id)

    user = Users(**payload.model_dump(exclude={"password", "role"}), role=payload.role.value)
    user.set_password(payload.password)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created user %s with role %s", user.username, user.role)
    return user


def update_user(db: Session, user_id: UUID, payload: UserUpdate) -> Users:
    user = get_user_or_404(db, user_id)
    data = payload.model_dump(exclude_unset=True)

    _validate_links(db, data.get("manager_id"), data.get("warehouse_id"), data.get("department_id"))
    if data.get("manager_id") == user.id:
        raise ValueError("A user cannot manage themselves")

    password = data.pop("password", None)
    if password:
        user.set_password(password)
    if data.get("role") is not None:
        data["role"] = UserRole(data["role"]).value

    for key, value in data.items():
        setattr(user, key, value)

    db.commit()
    db.refresh(user)
    return user


def set_user_status(db: Session, user_id: UUID, status: UserStatus, current_user: UserToken) -> Users:
    user = get_user_or_404(db, user_id)
    if user.id == current_user.user_id and status == UserStatus.inactive:
        raise ValueError("You cannot deactivate your own account")

    user.status = status.value
    db.commit()
    db.refresh(user)
    logger.info("User %s status set to %s", user.username, user.status)
    return user


def assign_manager(db: Session, user_id: UUID, manager_id: Optional[UUID]) -> Users:
    user = get_user_or_404(db, user_id)
    if manager_id is not None:
        manager = get_user_or_404(db, manager_id)
        if manager.id == user.id:
            raise ValueError("A user cannot manage themselves")
        if manager.role not in (UserRole.ADMIN.value, UserRole.MANAGER.value):
            raise ValueError("Assigned manager must have the manager or admin role")

    user.manager_id = manager_id
    db.commit()
    db.refresh(user)
    return user


def assign_department(db: Session, user_id: UUID, department_id: Optional[UUID]) -> Users:
    user = get_user_or_404(db, user_id)
    _validate_links(db, department_id=department_id)

    user.department_id = department_id
    db.commit()
    db.refresh(user)
    return user


def delete_user(db: Session, user_id: UUID, current_user: UserToken) -> Users:
    user = get_user_or_404(db, user_id)
    if user.id == current_user.user_id:
        raise ValueError("You cannot delete your own account")

    # ✅ Soft delete
    user.is_deleted = True
    user.status = UserStatus.inactive.value
    db.commit()
    db.refresh(user)
    logger.info("Soft deleted user %s", user.username)
    return user
