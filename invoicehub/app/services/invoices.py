"""Invoice lifecycle services: creation, editing, deletion and status changes."""

from typing import Iterable, List

import structlog
from sqlalchemy import or_
from sqlalchemy.orm import Session

from invoicehub.app.core.errors import NotFoundError
from invoicehub.app.core.invoice_status import InvoiceStatus, ensure_draft, transition
from invoicehub.app.core.settings import get_settings
from invoicehub.app.models.client import Client
from invoicehub.app.models.invoice import Invoice
from invoicehub.app.models.invoice_item import InvoiceItem
from invoicehub.app.models.invoice_template import InvoiceTemplate
from invoicehub.app.models.user import User
from invoicehub.app.schemas.invoice import InvoiceCreate, InvoiceUpdate
from invoicehub.app.schemas.invoice_item import InvoiceItemCreate
from invoicehub.app.services.numbering import allocate_invoice_number
from invoicehub.app.services.totals import calculate_invoice_totals, line_total, quantize_money

LOGGER = structlog.get_logger(__name__)


def get_owned_invoice(db: Session, invoice_id: int, owner_id: int) -> Invoice:
    invoice = db.query(Invoice).filter(Invoice.id == invoice_id, Invoice.owner_id == owner_id).first()
    if not invoice:
        raise NotFoundError("Invoice")
    return invoice


def get_owned_client(db: Session, client_id: int, owner_id: int) -> Client:
    client = db.query(Client).filter(Client.id == client_id, Client.owner_id == owner_id).first()
    if not client:
        raise NotFoundError("Client")
    return client


def visible_templates_query(db: Session, owner_id: int):
    """System templates plus the templates the owner created."""
    return db.query(InvoiceTemplate).filter(
        or_(InvoiceTemplate.is_system.is_(True), InvoiceTemplate.owner_id == owner_id)
    )


def get_visible_template(db: Session, template_id: int, owner_id: int) -> InvoiceTemplate:
    template = visible_templates_query(db, owner_id).filter(InvoiceTemplate.id == template_id).first()
    if not template:
        raise NotFoundError("Invoice template")
    return template


def _build_items(items: Iterable[InvoiceItemCreate]) -> List[InvoiceItem]:
    return [
        InvoiceItem(
            description=item.description,
            quantity=item.quantity,
            unit_price=quantize_money(item.unit_price),
            total=quantize_money(line_total(item.quantity, item.unit_price)),
        )
        for item in items
    ]


def _apply_payload(invoice: Invoice, payload: InvoiceCreate | InvoiceUpdate) -> None:
    totals = calculate_invoice_totals(payload.items, payload.tax_rate).rounded()
    invoice.client_id = payload.client_id
    invoice.template_id = payload.template_id
    invoice.issue_date = payload.issue_date
    invoice.due_date = payload.due_date
    invoice.notes = payload.notes
    invoice.tax_rate = payload.tax_rate
    invoice.subtotal = totals.subtotal
    invoice.tax_amount = totals.tax_amount
    invoice.total = totals.total


def _validate_references(db: Session, payload: InvoiceCreate | InvoiceUpdate, owner_id: int) -> None:
    get_owned_client(db, payload.client_id, owner_id)
    if payload.template_id is not None:
        get_visible_template(db, payload.template_id, owner_id)


def create_invoice(db: Session, *, owner: User, payload: InvoiceCreate) -> Invoice:
    """Allocate the next number and insert the invoice with its items in one transaction."""
    _validate_references(db, payload, owner.id)
    settings = get_settings()

    try:
        invoice_number = allocate_invoice_number(db, owner.id, settings.default_invoice_prefix)
        invoice = Invoice(
            owner_id=owner.id,
            invoice_number=invoice_number,
            status=InvoiceStatus.DRAFT,
            currency=payload.currency or owner.default_currency or settings.default_currency,
        )
        _apply_payload(invoice, payload)
        invoice.items = _build_items(payload.items)
        db.add(invoice)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(invoice)
    LOGGER.info(
        "invoice_created",
        owner_id=owner.id,
        invoice_id=invoice.id,
        invoice_number=invoice.invoice_number,
        total=str(invoice.total),
    )
    return invoice


def update_invoice(db: Session, *, invoice: Invoice, payload: InvoiceUpdate) -> Invoice:
    """Replace items and editable fields of a draft invoice."""
    ensure_draft(invoice.status, "edit")
    _validate_references(db, payload, invoice.owner_id)

    try:
        _apply_payload(invoice, payload)
        if payload.currency:
            invoice.currency = payload.currency
        # delete-orphan cascade removes the previous items on flush
        invoice.items = _build_items(payload.items)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(invoice)
    LOGGER.info("invoice_updated", invoice_id=invoice.id, total=str(invoice.total))
    return invoice


def delete_invoice(db: Session, *, invoice: Invoice) -> None:
    ensure_draft(invoice.status, "delete")
    invoice_id = invoice.id
    db.delete(invoice)
    db.commit()
    LOGGER.info("invoice_deleted", invoice_id=invoice_id)


def change_invoice_status(db: Session, *, invoice: Invoice, requested: InvoiceStatus) -> Invoice:
    """Sole writer of ``Invoice.status``; the transition table decides legality."""
    previous = InvoiceStatus(invoice.status)
    invoice.status = transition(previous, requested)
    db.commit()
    db.refresh(invoice)
    LOGGER.info(
        "invoice_status_changed",
        invoice_id=invoice.id,
        from_status=previous.value,
        to_status=invoice.status.value,
    )
    return invoice
