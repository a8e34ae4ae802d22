import logging
from datetime import datetime, timedelta, timezone
from fastapi import Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError
from sqlalchemy.orm import Session

from shared.models.users import Users
from shared.utils.app_status_code import AppStatusCode
from shared.utils.enums import UserRole, UserStatus
from shared.core.config import settings
from shared.helpers.json_response_helper import error_response
from shared.core.schemas import UserToken
from shared.core.database import get_warehouse_db as get_db

logger = logging.getLogger(__name__)

security = HTTPBearer()


def create_access_token(data: dict):
    payload = data.copy()

    expires = datetime.now(timezone.utc) + \
        timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload["exp"] = expires

    # uuids are not json serialisable
    for key in ("user_id", "warehouse_id"):
        if payload.get(key) is not None:
            payload[key] = str(payload[key])

    return jwt.encode(payload, settings.JWT_SECRET,
                      algorithm=settings.JWT_ALGORITHM)


def build_user_token(user: Users) -> dict:
    return {
        "user_id": user.id,
        "name": user.name,
        "role": user.role,
        "warehouse_id": user.warehouse_id,
    }


def verify_token(token: str) -> UserToken:
    """Verify and decode a JWT token."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        return error_response(
            message="Token has expired",
            status_code=AppStatusCode.AUTHENTICATION_TOKEN_EXPIRED,
            http_status=status.HTTP_401_UNAUTHORIZED
        )
    except JWTError:
        return error_response(
            message="Invalid or expired token",
            status_code=AppStatusCode.AUTHENTICATION_TOKEN_INVALID,
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    try:
        return UserToken(**payload)
    except ValidationError:
        return error_response(
            message="Invalid token structure",
            status_code=AppStatusCode.AUTHENTICATION_TOKEN_INVALID,
            http_status=status.HTTP_401_UNAUTHORIZED
        )


def validate_current_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Session = Depends(get_db)
) -> UserToken:
    user_data = verify_token(credentials.credentials)

    user = db.query(Users).filter(
        Users.id == user_data.user_id,
        Users.is_deleted == False
    ).first()

    if not user:
        return error_response(
            message="User not found",
            status_code=AppStatusCode.AUTHENTICATION_USER_INVALID,
            http_status=404
        )

    if (user.status or "").lower() != UserStatus.active.value:
        return error_response(
            message="User is not active. Access denied",
            status_code=AppStatusCode.AUTHENTICATION_USER_INACTIVE,
            http_status=403
        )

    # role and warehouse may have changed since the token was issued
    user_data.role = user.role
    user_data.warehouse_id = user.warehouse_id
    user_data.name = user.name
    user_data.status = user.status
    return user_data


def allow_admin(current_user: UserToken = Depends(validate_current_token)):
    if current_user.role != UserRole.ADMIN.value:
        logger.warning("Admin-only action refused for user %s",
                       current_user.user_id)
        return error_response(
            message="Access forbidden: Admins only",
            status_code=AppStatusCode.UNAUTHORIZED_ACTION,
            http_status=403
        )

    return current_user


def allow_manager(current_user: UserToken = Depends(validate_current_token)):
    if current_user.role not in (UserRole.ADMIN.value, UserRole.MANAGER.value):
        logger.warning("Manager action refused for user %s",
                       current_user.user_id)
        return error_response(
            message="Access forbidden: Managers and admins only",
            status_code=AppStatusCode.UNAUTHORIZED_ACTION,
            http_status=403
        )

    return current_user
