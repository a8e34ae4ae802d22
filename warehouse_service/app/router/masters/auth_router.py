# app/router/masters/auth_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import validate_current_token
from ...schemas.masters.users_schemas import LoginRequest, TokenResponse, UserOut
from ...crud.masters import users_crud as crud

router = APIRouter(prefix="/api", tags=["auth"])


@router.post("/auth/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)):
    return crud.login(db, payload)


@router.get("/current-user", response_model=UserOut)
def current_user(
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(validate_current_token)
):
    return crud.get_user_or_404(db, current_user.user_id)
