"""CRUD operations for invoice templates."""

from typing import List, Optional

from sqlalchemy.orm import Session

from invoicehub.app.core.errors import DependentRecordExistsError, InvalidStateError
from invoicehub.app.models.invoice import Invoice
from invoicehub.app.models.invoice_template import InvoiceTemplate
from invoicehub.app.schemas.invoice_template import InvoiceTemplateCreate, InvoiceTemplateUpdate
from invoicehub.app.services.invoices import visible_templates_query

REQUIRED_FIELDS = {"name", "category", "styles"}


class CRUDInvoiceTemplate:
    def create(self, db: Session, *, obj_in: InvoiceTemplateCreate, owner_id: int) -> InvoiceTemplate:
        obj = InvoiceTemplate(owner_id=owner_id, is_system=False, is_default=False, **obj_in.model_dump())
        db.add(obj)
        db.commit()
        db.refresh(obj)
        return obj

    def get(self, db: Session, *, template_id: int, owner_id: int) -> Optional[InvoiceTemplate]:
        return visible_templates_query(db, owner_id).filter(InvoiceTemplate.id == template_id).first()

    def get_multi(self, db: Session, *, owner_id: int) -> List[InvoiceTemplate]:
        return (
            visible_templates_query(db, owner_id)
            .order_by(InvoiceTemplate.is_default.desc(), InvoiceTemplate.name.asc(), InvoiceTemplate.id.asc())
            .all()
        )

    def _ensure_mutable(self, db: Session, db_obj: InvoiceTemplate) -> None:
        if db_obj.is_system:
            raise InvalidStateError("System templates cannot be modified")
        in_use = db.query(Invoice.id).filter(Invoice.template_id == db_obj.id).first()
        if in_use:
            raise DependentRecordExistsError("Cannot modify template that is used by existing invoices")

    def update(self, db: Session, *, db_obj: InvoiceTemplate, obj_in: InvoiceTemplateUpdate) -> InvoiceTemplate:
        self._ensure_mutable(db, db_obj)
        update_data = obj_in.model_dump(exclude_unset=True)
        for field, value in update_data.items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(db_obj, field, value)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, db_obj: InvoiceTemplate) -> None:
        self._ensure_mutable(db, db_obj)
        db.delete(db_obj)
        db.commit()


invoice_template_crud = CRUDInvoiceTemplate()
