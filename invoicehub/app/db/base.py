from invoicehub.app.db.base_class import Base

# Import models to register metadata for Base.metadata.create_all in tests
from invoicehub.app.models.user import User  # noqa: F401
from invoicehub.app.models.client import Client  # noqa: F401
from invoicehub.app.models.invoice_template import InvoiceTemplate  # noqa: F401
from invoicehub.app.models.invoice import Invoice  # noqa: F401
from invoicehub.app.models.invoice_item import InvoiceItem  # noqa: F401
