"""Reportlab renderers for invoice PDFs."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from io import BytesIO
from typing import Any, Dict, List, Optional

from reportlab.lib.colors import Color, HexColor
from reportlab.lib.pagesizes import letter
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

from invoicehub.app.services.totals import money_str


@dataclass(frozen=True)
class PdfLineItem:
    description: str
    quantity: int
    unit_price: Decimal
    total: Decimal


@dataclass(frozen=True)
class PdfParty:
    name: str
    company: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    tax_id: Optional[str] = None


@dataclass(frozen=True)
class PdfInvoice:
    """Everything a renderer needs, detached from the ORM session."""

    invoice_number: str
    status: str
    issue_date: date
    due_date: Optional[date]
    currency: str
    seller: PdfParty
    client: PdfParty
    items: List[PdfLineItem]
    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total: Decimal
    notes: Optional[str] = None


class InvoiceRenderer:
    """Plain black-and-white layout; subclasses restyle the header and table."""

    key = "default"
    margin = 50
    row_height = 18
    colors = {
        "primary": "#000000",
        "secondary": "#555555",
        "accent": "#000000",
        "text": "#000000",
        "border": "#cccccc",
    }
    fonts = {"heading": "Helvetica-Bold", "body": "Helvetica"}

    def __init__(self, styles: Optional[Dict[str, Any]] = None):
        styles = styles or {}
        self.palette = {
            name: self._color(styles.get("colors", {}).get(name), fallback)
            for name, fallback in self.colors.items()
        }
        self.heading_font = self._font(styles.get("fonts", {}).get("heading"), self.fonts["heading"])
        self.body_font = self._font(styles.get("fonts", {}).get("body"), self.fonts["body"])

    @staticmethod
    def _color(value: Optional[str], fallback: str) -> Color:
        try:
            return HexColor(value) if value else HexColor(fallback)
        except (ValueError, TypeError):
            return HexColor(fallback)

    @staticmethod
    def _font(value: Optional[str], fallback: str) -> str:
        if not isinstance(value, str) or not value:
            return fallback
        try:
            pdfmetrics.getFont(value)
        except KeyError:
            return fallback
        return value

    def render(self, invoice: PdfInvoice) -> bytes:
        buffer = BytesIO()
        pdf = canvas.Canvas(buffer, pagesize=letter)
        pdf.setTitle(f"Invoice {invoice.invoice_number}")
        width, height = letter

        y = self.draw_header(pdf, invoice, width, height)
        y = self.draw_parties(pdf, invoice, y, width)
        y = self.draw_items(pdf, invoice, y, width, height)
        y = self.draw_totals(pdf, invoice, y, width)
        self.draw_notes(pdf, invoice, y)

        pdf.showPage()
        pdf.save()
        return buffer.getvalue()

    def amount(self, invoice: PdfInvoice, value: Decimal) -> str:
        return f"{invoice.currency} {money_str(value)}"

    def draw_header(self, pdf: canvas.Canvas, invoice: PdfInvoice, width: float, height: float) -> float:
        top = height - self.margin
        pdf.setFillColor(self.palette["primary"])
        pdf.setFont(self.heading_font, 22)
        pdf.drawString(self.margin, top - 10, "INVOICE")

        pdf.setFont(self.body_font, 10)
        pdf.setFillColor(self.palette["text"])
        right = width - self.margin
        pdf.drawRightString(right, top - 4, f"Invoice #: {invoice.invoice_number}")
        pdf.drawRightString(right, top - 18, f"Issue date: {invoice.issue_date.isoformat()}")
        due = invoice.due_date.isoformat() if invoice.due_date else "On receipt"
        pdf.drawRightString(right, top - 32, f"Due date: {due}")
        pdf.drawRightString(right, top - 46, f"Status: {invoice.status}")
        return top - 80

    def _party_lines(self, party: PdfParty) -> List[str]:
        lines = [party.name]
        for value in (party.company, party.address, party.email, party.phone):
            if value:
                lines.extend(str(value).splitlines())
        if party.tax_id:
            lines.append(f"Tax ID: {party.tax_id}")
        return lines

    def draw_parties(self, pdf: canvas.Canvas, invoice: PdfInvoice, y: float, width: float) -> float:
        column = width / 2
        blocks = [("From", invoice.seller, self.margin), ("Bill to", invoice.client, column)]
        lowest = y
        for title, party, x in blocks:
            pdf.setFont(self.heading_font, 11)
            pdf.setFillColor(self.palette["secondary"])
            pdf.drawString(x, y, title)
            pdf.setFont(self.body_font, 10)
            pdf.setFillColor(self.palette["text"])
            line_y = y - 15
            for line in self._party_lines(party):
                pdf.drawString(x, line_y, line[:60])
                line_y -= 13
            lowest = min(lowest, line_y)
        return lowest - 20

    def draw_table_header(self, pdf: canvas.Canvas, y: float, width: float) -> float:
        pdf.setFillColor(self.palette["accent"])
        pdf.setFont(self.heading_font, 10)
        self._draw_row(pdf, y, width, "Description", "Qty", "Unit price", "Amount")
        pdf.setStrokeColor(self.palette["border"])
        pdf.line(self.margin, y - 6, width - self.margin, y - 6)
        return y - self.row_height - 4

    def _draw_row(self, pdf: canvas.Canvas, y: float, width: float, description: str, qty: str, price: str, amount: str):
        right = width - self.margin
        pdf.drawString(self.margin, y, description[:55])
        pdf.drawRightString(right - 200, y, qty)
        pdf.drawRightString(right - 100, y, price)
        pdf.drawRightString(right, y, amount)

    def draw_items(self, pdf: canvas.Canvas, invoice: PdfInvoice, y: float, width: float, height: float) -> float:
        y = self.draw_table_header(pdf, y, width)
        for item in invoice.items:
            if y < self.margin + 120:
                pdf.showPage()
                y = self.draw_table_header(pdf, height - self.margin, width)
            pdf.setFont(self.body_font, 10)
            pdf.setFillColor(self.palette["text"])
            self._draw_row(
                pdf,
                y,
                width,
                item.description,
                str(item.quantity),
                money_str(item.unit_price),
                money_str(item.total),
            )
            y -= self.row_height
        pdf.setStrokeColor(self.palette["border"])
        pdf.line(self.margin, y + 8, width - self.margin, y + 8)
        return y - 10

    def draw_totals(self, pdf: canvas.Canvas, invoice: PdfInvoice, y: float, width: float) -> float:
        right = width - self.margin
        label_x = right - 100
        pdf.setFont(self.body_font, 10)
        pdf.setFillColor(self.palette["text"])
        pdf.drawRightString(label_x, y, "Subtotal")
        pdf.drawRightString(right, y, self.amount(invoice, invoice.subtotal))
        pdf.drawRightString(label_x, y - 15, f"Tax ({invoice.tax_rate.normalize():f}%)")
        pdf.drawRightString(right, y - 15, self.amount(invoice, invoice.tax_amount))
        pdf.setFont(self.heading_font, 12)
        pdf.setFillColor(self.palette["primary"])
        pdf.drawRightString(label_x, y - 35, "Total")
        pdf.drawRightString(right, y - 35, self.amount(invoice, invoice.total))
        return y - 65

    def draw_notes(self, pdf: canvas.Canvas, invoice: PdfInvoice, y: float) -> None:
        if not invoice.notes:
            return
        pdf.setFont(self.heading_font, 10)
        pdf.setFillColor(self.palette["secondary"])
        pdf.drawString(self.margin, y, "Notes")
        pdf.setFont(self.body_font, 9)
        pdf.setFillColor(self.palette["text"])
        line_y = y - 14
        for line in invoice.notes.splitlines():
            pdf.drawString(self.margin, line_y, line[:100])
            line_y -= 12


class ModernInvoiceRenderer(InvoiceRenderer):
    key = "modern"
    colors = {
        "primary": "#1f2937",
        "secondary": "#6b7280",
        "accent": "#3b82f6",
        "text": "#111827",
        "border": "#e5e7eb",
    }

    def draw_header(self, pdf: canvas.Canvas, invoice: PdfInvoice, width: float, height: float) -> float:
        band_height = 110
        pdf.setFillColor(self.palette["primary"])
        pdf.rect(0, height - band_height, width, band_height, fill=1, stroke=0)

        pdf.setFillColor(HexColor("#FFFFFF"))
        pdf.setFont(self.heading_font, 20)
        pdf.drawString(self.margin, height - 55, invoice.seller.company or invoice.seller.name)
        pdf.setFont(self.body_font, 10)
        pdf.drawString(self.margin, height - 75, f"Invoice {invoice.invoice_number}")

        badge_width = 110
        badge_x = width - self.margin - badge_width
        pdf.setFillColor(self.palette["accent"])
        pdf.roundRect(badge_x, height - 70, badge_width, 28, 8, fill=1, stroke=0)
        pdf.setFillColor(HexColor("#FFFFFF"))
        pdf.setFont(self.heading_font, 12)
        pdf.drawCentredString(badge_x + badge_width / 2, height - 60, invoice.status)

        pdf.setFillColor(self.palette["secondary"])
        pdf.setFont(self.body_font, 9)
        due = invoice.due_date.isoformat() if invoice.due_date else "On receipt"
        pdf.drawString(self.margin, height - band_height - 20, f"Issued {invoice.issue_date.isoformat()}  |  Due {due}")
        return height - band_height - 50


class ProfessionalInvoiceRenderer(InvoiceRenderer):
    key = "professional"
    colors = {
        "primary": "#111827",
        "secondary": "#4b5563",
        "accent": "#1f2937",
        "text": "#000000",
        "border": "#d1d5db",
    }
    fonts = {"heading": "Times-Bold", "body": "Times-Roman"}

    def draw_header(self, pdf: canvas.Canvas, invoice: PdfInvoice, width: float, height: float) -> float:
        top = height - self.margin
        pdf.setFillColor(self.palette["primary"])
        pdf.setFont(self.heading_font, 24)
        pdf.drawCentredString(width / 2, top - 10, invoice.seller.company or invoice.seller.name)
        pdf.setFont(self.body_font, 11)
        pdf.setFillColor(self.palette["secondary"])
        pdf.drawCentredString(width / 2, top - 30, f"INVOICE {invoice.invoice_number}")

        pdf.setStrokeColor(self.palette["accent"])
        pdf.setLineWidth(1.5)
        pdf.line(self.margin, top - 42, width - self.margin, top - 42)
        pdf.setLineWidth(1)

        pdf.setFont(self.body_font, 10)
        pdf.setFillColor(self.palette["text"])
        due = invoice.due_date.isoformat() if invoice.due_date else "On receipt"
        pdf.drawString(self.margin, top - 60, f"Date of issue: {invoice.issue_date.isoformat()}")
        pdf.drawRightString(width - self.margin, top - 60, f"Payment due: {due}")
        return top - 95
