# app/crud/sales/clients_crud.py
from typing import List
from uuid import UUID
from sqlalchemy.orm import Session

from shared.helpers.json_response_helper import error_response, not_found
from shared.utils.app_status_code import AppStatusCode
from ...helpers.code_generator import next_code
from ...models.sales.clients import Client
from ...models.sales.sales_orders import SalesOrder
from ...schemas.sales.clients_schemas import ClientCreate, ClientOut, ClientUpdate


def get_clients(db: Session) -> List[Client]:
    return db.query(Client).order_by(Client.name.asc()).all()


def get_active_clients(db: Session) -> List[Client]:
    return (
        db.query(Client)
        .filter(Client.is_active == True)
        .order_by(Client.name.asc())
        .all()
    )


def get_client_or_404(db: Session, client_id: UUID) -> Client:
    client = db.query(Client).filter(Client.id == client_id).first()
    if not client:
        return not_found("Client")
    return client


def next_client_code(db: Session) -> str:
    return next_code(db, Client.client_code, "CLI")


def create_client(db: Session, payload: ClientCreate) -> Client:
    client = Client(client_code=next_client_code(db), **payload.model_dump())
    db.add(client)
    db.commit()
    db.refresh(client)
    return client


def update_client(db: Session, client_id: UUID, payload: ClientUpdate) -> Client:
    client = get_client_or_404(db, client_id)

    for key, value in payload.model_dump(exclude_unset=True).items():
        setattr(client, key, value)

    db.commit()
    db.refresh(client)
    return client


def delete_client(db: Session, client_id: UUID) -> ClientOut:
    client = get_client_or_404(db, client_id)

    in_use = db.query(SalesOrder.id).filter(SalesOrder.client_id == client_id).first()
    if in_use:
        return error_response(
            message="Client has sales orders; deactivate it instead",
            status_code=AppStatusCode.OPERATION_FAILED
        )

    out = ClientOut.model_validate(client)
    db.delete(client)
    db.commit()
    return out
