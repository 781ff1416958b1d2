"""Invoice total derivation shared by create, update and PDF paths."""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_decimal(value) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def quantize_money(value) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def money_str(value) -> str:
    """Two-decimal string used for every money field in API payloads."""
    return str(quantize_money(value))


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Decimal
    tax_amount: Decimal
    total: Decimal

    def rounded(self) -> "InvoiceTotals":
        return InvoiceTotals(
            subtotal=quantize_money(self.subtotal),
            tax_amount=quantize_money(self.tax_amount),
            total=quantize_money(self.total),
        )


def line_total(quantity, unit_price) -> Decimal:
    return Decimal(int(quantity)) * to_decimal(unit_price)


def calculate_invoice_totals(items: Iterable, tax_rate=ZERO) -> InvoiceTotals:
    """Compute subtotal, tax and total for items exposing ``quantity`` and ``unit_price``.

    Values are kept at full precision; call ``rounded()`` at the storage or
    response boundary.
    """
    subtotal = sum((line_total(item.quantity, item.unit_price) for item in items), Decimal("0"))
    tax_amount = subtotal * (to_decimal(tax_rate) / Decimal("100"))
    return InvoiceTotals(subtotal=subtotal, tax_amount=tax_amount, total=subtotal + tax_amount)
