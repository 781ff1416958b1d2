"""Invoice routes: CRUD, status changes and PDF download."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from invoicehub.app.core.invoice_status import InvoiceStatus
from invoicehub.app.db.session import get_db
from invoicehub.app.dependencies.auth import get_current_user
from invoicehub.app.models.invoice import Invoice
from invoicehub.app.models.user import User
from invoicehub.app.schemas.invoice import InvoiceCreate, InvoiceRead, InvoiceStatusUpdate, InvoiceUpdate
from invoicehub.app.services.invoice_pdf import pdf_filename, render_invoice_pdf
from invoicehub.app.services.invoices import (
    change_invoice_status,
    create_invoice,
    delete_invoice,
    get_owned_invoice,
    update_invoice,
)

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.get("/", response_model=List[InvoiceRead])
async def list_invoices(
    status: Optional[InvoiceStatus] = None,
    client_id: Optional[int] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    query = db.query(Invoice).filter(Invoice.owner_id == current_user.id)
    if status:
        query = query.filter(Invoice.status == status)
    if client_id:
        query = query.filter(Invoice.client_id == client_id)
    return query.order_by(Invoice.created_at.desc(), Invoice.id.desc()).all()


@router.post("/", response_model=InvoiceRead, status_code=status.HTTP_201_CREATED)
async def create_invoice_endpoint(
    payload: InvoiceCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return create_invoice(db, owner=current_user, payload=payload)


@router.get("/{invoice_id}", response_model=InvoiceRead)
async def get_invoice(invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return get_owned_invoice(db, invoice_id, current_user.id)


@router.put("/{invoice_id}", response_model=InvoiceRead)
async def update_invoice_endpoint(
    invoice_id: int,
    payload: InvoiceUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    invoice = get_owned_invoice(db, invoice_id, current_user.id)
    return update_invoice(db, invoice=invoice, payload=payload)


@router.delete("/{invoice_id}")
async def delete_invoice_endpoint(
    invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    invoice = get_owned_invoice(db, invoice_id, current_user.id)
    delete_invoice(db, invoice=invoice)
    return {"message": "Invoice deleted successfully"}


@router.patch("/{invoice_id}/status", response_model=InvoiceRead)
async def update_invoice_status(
    invoice_id: int,
    payload: InvoiceStatusUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    invoice = get_owned_invoice(db, invoice_id, current_user.id)
    return change_invoice_status(db, invoice=invoice, requested=payload.status)


@router.get("/{invoice_id}/pdf")
async def download_invoice_pdf(
    invoice_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)
):
    invoice = get_owned_invoice(db, invoice_id, current_user.id)
    content = render_invoice_pdf(db, invoice)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{pdf_filename(invoice)}"'},
    )
