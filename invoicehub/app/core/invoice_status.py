"""Invoice lifecycle statuses and the transition guard."""

import enum
from typing import Dict, FrozenSet, List

from invoicehub.app.core.errors import InvalidStateError, InvalidTransitionError


class InvoiceStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    SENT = "SENT"
    PAID = "PAID"
    OVERDUE = "OVERDUE"
    CANCELLED = "CANCELLED"


ALLOWED_TRANSITIONS: Dict[InvoiceStatus, FrozenSet[InvoiceStatus]] = {
    InvoiceStatus.DRAFT: frozenset({InvoiceStatus.SENT, InvoiceStatus.CANCELLED}),
    InvoiceStatus.SENT: frozenset({InvoiceStatus.PAID, InvoiceStatus.OVERDUE, InvoiceStatus.CANCELLED}),
    InvoiceStatus.PAID: frozenset(),
    InvoiceStatus.OVERDUE: frozenset({InvoiceStatus.PAID, InvoiceStatus.CANCELLED}),
    InvoiceStatus.CANCELLED: frozenset({InvoiceStatus.DRAFT}),
}


def allowed_transitions(current: InvoiceStatus | str) -> List[InvoiceStatus]:
    """Return reachable statuses from ``current`` in declaration order."""
    current_status = InvoiceStatus(current)
    reachable = ALLOWED_TRANSITIONS[current_status]
    return [status for status in InvoiceStatus if status in reachable]


def transition(current: InvoiceStatus | str, requested: InvoiceStatus | str) -> InvoiceStatus:
    """Validate a status change and return the new status.

    Self-transitions are not in the table and are rejected like any other
    disallowed pair.
    """
    current_status = InvoiceStatus(current)
    requested_status = InvoiceStatus(requested)
    if requested_status not in ALLOWED_TRANSITIONS[current_status]:
        raise InvalidTransitionError(
            current_status.value,
            requested_status.value,
            [status.value for status in allowed_transitions(current_status)],
        )
    return requested_status


def ensure_draft(current: InvoiceStatus | str, action: str) -> None:
    if InvoiceStatus(current) is not InvoiceStatus.DRAFT:
        raise InvalidStateError(f"Cannot {action} invoice that is not in draft status")
