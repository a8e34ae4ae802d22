# app/router/sales/clients_router.py
from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from shared.core.database import get_warehouse_db as get_db
from shared.core.schemas import UserToken
from shared.core.auth import allow_manager, validate_current_token
from ...schemas.sales.clients_schemas import ClientCreate, ClientOut, ClientUpdate, NextCodeOut
from ...crud.sales import clients_crud as crud

router = APIRouter(prefix="/api/clients", tags=["clients"],
                   dependencies=[Depends(validate_current_token)])


@router.get("", response_model=List[ClientOut])
def read_clients(db: Session = Depends(get_db)):
    return crud.get_clients(db)


@router.get("/active", response_model=List[ClientOut])
def read_active_clients(db: Session = Depends(get_db)):
    return crud.get_active_clients(db)


@router.get("/next-code", response_model=NextCodeOut)
def read_next_code(db: Session = Depends(get_db)):
    return NextCodeOut(code=crud.next_client_code(db))


@router.get("/{client_id}", response_model=ClientOut)
def read_client(client_id: UUID, db: Session = Depends(get_db)):
    return crud.get_client_or_404(db, client_id)


@router.post("", response_model=ClientOut)
def create_client(
    payload: ClientCreate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.create_client(db, payload)


@router.put("/{client_id}", response_model=ClientOut)
def update_client(
    client_id: UUID,
    payload: ClientUpdate,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.update_client(db, client_id, payload)


@router.delete("/{client_id}", response_model=ClientOut)
def delete_client(
    client_id: UUID,
    db: Session = Depends(get_db),
    current_user: UserToken = Depends(allow_manager)
):
    return crud.delete_client(db, client_id)
