"""Build invoice PDFs from stored records."""

import structlog
from sqlalchemy.orm import Session

from invoicehub.app.core.errors import UpstreamFailureError
from invoicehub.app.models.invoice import Invoice
from invoicehub.app.models.invoice_template import InvoiceTemplate
from invoicehub.app.services.pdf_renderers import PdfInvoice, PdfLineItem, PdfParty
from invoicehub.app.services.pdf_templates import select_renderer
from invoicehub.app.services.totals import calculate_invoice_totals, line_total, to_decimal

LOGGER = structlog.get_logger(__name__)


def pdf_filename(invoice: Invoice) -> str:
    return f"invoice-{invoice.invoice_number}.pdf"


def build_pdf_invoice(invoice: Invoice) -> PdfInvoice:
    # Totals come from the same calculator used on create/update
    totals = calculate_invoice_totals(invoice.items, invoice.tax_rate).rounded()
    owner = invoice.owner
    client = invoice.client
    return PdfInvoice(
        invoice_number=invoice.invoice_number,
        status=invoice.status.value,
        issue_date=invoice.issue_date,
        due_date=invoice.due_date,
        currency=invoice.currency,
        seller=PdfParty(
            name=owner.name or owner.email,
            company=owner.business_name,
            email=owner.email,
            phone=owner.phone,
            address=owner.address,
            tax_id=owner.tax_id,
        ),
        client=PdfParty(
            name=client.name,
            company=client.company,
            email=client.email,
            phone=client.phone,
            address=client.address,
        ),
        items=[
            PdfLineItem(
                description=item.description,
                quantity=item.quantity,
                unit_price=to_decimal(item.unit_price),
                total=line_total(item.quantity, item.unit_price),
            )
            for item in invoice.items
        ],
        subtotal=totals.subtotal,
        tax_rate=to_decimal(invoice.tax_rate),
        tax_amount=totals.tax_amount,
        total=totals.total,
        notes=invoice.notes,
    )


def render_invoice_pdf(db: Session, invoice: Invoice) -> bytes:
    template = None
    if invoice.template_id is not None:
        template = db.query(InvoiceTemplate).filter(InvoiceTemplate.id == invoice.template_id).first()

    renderer_cls = select_renderer(invoice.template_id, template.name if template else None)
    renderer = renderer_cls(template.styles if template else None)
    try:
        content = renderer.render(build_pdf_invoice(invoice))
    except Exception as exc:
        LOGGER.exception("pdf_render_failed", invoice_id=invoice.id, renderer=renderer_cls.key)
        raise UpstreamFailureError("Failed to generate PDF") from exc

    LOGGER.info("pdf_rendered", invoice_id=invoice.id, renderer=renderer_cls.key, size=len(content))
    return content
