"""Choose the PDF renderer for an invoice from its stored template reference."""

from typing import Dict, Optional, Type

from invoicehub.app.services.pdf_renderers import InvoiceRenderer, ModernInvoiceRenderer, ProfessionalInvoiceRenderer

DEFAULT_RENDERER = InvoiceRenderer
UNKNOWN_TEMPLATE_RENDERER = ModernInvoiceRenderer

NAMED_RENDERERS: Dict[str, Type[InvoiceRenderer]] = {
    "modern": ModernInvoiceRenderer,
    "professional": ProfessionalInvoiceRenderer,
}


def select_renderer(template_id: Optional[int], template_name: Optional[str]) -> Type[InvoiceRenderer]:
    """Three-way decision table.

    * no reference, or a reference whose record could not be loaded -> default
    * a known name, compared case-insensitively -> that renderer
    * any other resolved template, including legacy names -> modern
    """
    if template_id is None or template_name is None:
        return DEFAULT_RENDERER
    return NAMED_RENDERERS.get(template_name.strip().lower(), UNKNOWN_TEMPLATE_RENDERER)
