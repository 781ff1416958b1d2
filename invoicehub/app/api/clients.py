"""Client endpoints."""

from typing import Dict, List

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy import func
from sqlalchemy.orm import Session

from invoicehub.app.core.errors import DependentRecordExistsError
from invoicehub.app.db.session import get_db
from invoicehub.app.dependencies.auth import get_current_user
from invoicehub.app.models.client import Client
from invoicehub.app.models.invoice import Invoice
from invoicehub.app.models.user import User
from invoicehub.app.schemas.client import ClientCreate, ClientRead, ClientUpdate
from invoicehub.app.services.invoices import get_owned_client

LOGGER = structlog.get_logger(__name__)

router = APIRouter(prefix="/clients", tags=["clients"])


def _invoice_counts(db: Session, owner_id: int) -> Dict[int, int]:
    rows = (
        db.query(Invoice.client_id, func.count(Invoice.id))
        .filter(Invoice.owner_id == owner_id)
        .group_by(Invoice.client_id)
        .all()
    )
    return {client_id: count for client_id, count in rows}


def _with_count(client: Client, count: int) -> ClientRead:
    data = ClientRead.model_validate(client)
    data.invoice_count = count
    return data


@router.get("/", response_model=List[ClientRead])
async def list_clients(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    clients = (
        db.query(Client)
        .filter(Client.owner_id == current_user.id)
        .order_by(Client.created_at.desc(), Client.id.desc())
        .all()
    )
    counts = _invoice_counts(db, current_user.id)
    return [_with_count(client, counts.get(client.id, 0)) for client in clients]


@router.post("/", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
async def create_client(client_in: ClientCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    client = Client(owner_id=current_user.id, **client_in.model_dump())
    db.add(client)
    db.commit()
    db.refresh(client)
    LOGGER.info("client_created", owner_id=current_user.id, client_id=client.id)
    return _with_count(client, 0)


@router.get("/{client_id}", response_model=ClientRead)
async def get_client(client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    client = get_owned_client(db, client_id, current_user.id)
    return _with_count(client, len(client.invoices))


@router.put("/{client_id}", response_model=ClientRead)
async def update_client(
    client_id: int,
    client_in: ClientUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    client = get_owned_client(db, client_id, current_user.id)
    for field, value in client_in.model_dump().items():
        setattr(client, field, value)
    db.commit()
    db.refresh(client)
    return _with_count(client, len(client.invoices))


@router.delete("/{client_id}")
async def delete_client(client_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    client = get_owned_client(db, client_id, current_user.id)
    if client.invoices:
        raise DependentRecordExistsError("Cannot delete client with existing invoices")
    db.delete(client)
    db.commit()
    LOGGER.info("client_deleted", owner_id=current_user.id, client_id=client_id)
    return {"message": "Client deleted successfully"}
