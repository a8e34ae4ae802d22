from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel, Field

from shared.utils.enums import UserRole, UserStatus


class UserBase(BaseModel):
    name: str
    email: Optional[str] = None
    role: UserRole = UserRole.EMPLOYEE
    manager_id: Optional[UUID] = None
    warehouse_id: Optional[UUID] = None
    department_id: Optional[UUID] = None


class UserCreate(UserBase):
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6)


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[UserRole] = None
    manager_id: Optional[UUID] = None
    warehouse_id: Optional[UUID] = None
    department_id: Optional[UUID] = None
    password: Optional[str] = Field(None, min_length=6)


class UserStatusUpdate(BaseModel):
    status: UserStatus


class UserManagerUpdate(BaseModel):
    manager_id: Optional[UUID] = None


class UserDepartmentUpdate(BaseModel):
    department_id: Optional[UUID] = None


class UserOut(BaseModel):
    id: UUID
    username: str
    name: str
    email: Optional[str] = None
    role: str
    manager_id: Optional[UUID] = None
    warehouse_id: Optional[UUID] = None
    department_id: Optional[UUID] = None
    status: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut
