"""Invoice schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from invoicehub.app.core.invoice_status import InvoiceStatus
from invoicehub.app.schemas.invoice_item import InvoiceItemCreate, InvoiceItemRead


class InvoiceBase(BaseModel):
    client_id: int
    issue_date: date
    due_date: Optional[date] = None
    notes: Optional[str] = None
    tax_rate: Decimal = Field(default=Decimal("0"), ge=0, le=100, decimal_places=2)
    template_id: Optional[int] = None
    currency: Optional[str] = Field(default=None, pattern=r"^[A-Z]{3}$")
    items: List[InvoiceItemCreate] = Field(min_length=1)


class InvoiceCreate(InvoiceBase):
    pass


class InvoiceUpdate(InvoiceBase):
    pass


class InvoiceStatusUpdate(BaseModel):
    status: InvoiceStatus


class InvoiceClientSummary(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    company: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class InvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    client_id: int
    template_id: Optional[int]

    invoice_number: str
    status: InvoiceStatus
    issue_date: date
    due_date: Optional[date]

    subtotal: Decimal
    tax_rate: Decimal
    tax_amount: Decimal
    total: Decimal
    currency: str
    notes: Optional[str]

    created_at: datetime
    updated_at: datetime

    items: List[InvoiceItemRead] = []
    client: Optional[InvoiceClientSummary] = None
