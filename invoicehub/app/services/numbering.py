"""Per-user invoice number allocation."""

import structlog
from sqlalchemy.orm import Session

from invoicehub.app.core.errors import NotFoundError
from invoicehub.app.models.user import User

LOGGER = structlog.get_logger(__name__)

NUMBER_WIDTH = 4


def format_invoice_number(prefix: str, counter: int) -> str:
    """Zero-pad ``counter`` to a minimum of four digits; wider counters are kept whole."""
    return f"{prefix}{counter:0{NUMBER_WIDTH}d}"


def allocate_invoice_number(db: Session, owner_id: int, default_prefix: str = "INV") -> str:
    """Read, use and increment the owner's counter inside the caller's transaction.

    The user row is locked where the database supports ``SELECT ... FOR UPDATE``;
    the caller commits or rolls back together with the invoice insert.
    """
    user = db.query(User).filter(User.id == owner_id).with_for_update().first()
    if user is None:
        raise NotFoundError("User")

    counter = user.next_invoice_num or 1
    invoice_number = format_invoice_number(user.invoice_prefix or default_prefix, counter)
    user.next_invoice_num = counter + 1
    db.flush()
    LOGGER.debug("invoice_number_allocated", owner_id=owner_id, invoice_number=invoice_number)
    return invoice_number
