from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import BaseModel


class DepartmentBase(BaseModel):
    name: str
    description: Optional[str] = None
    manager_id: Optional[UUID] = None
    is_active: bool = True


class DepartmentCreate(DepartmentBase):
    pass


class DepartmentUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    manager_id: Optional[UUID] = None
    is_active: Optional[bool] = None


class DepartmentOut(DepartmentBase):
    id: UUID
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
