"""Invoice template endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from invoicehub.app.core.errors import NotFoundError
from invoicehub.app.core.seed import ensure_system_templates
from invoicehub.app.crud.crud_invoice_template import invoice_template_crud
from invoicehub.app.db.session import get_db
from invoicehub.app.dependencies.auth import get_current_user
from invoicehub.app.models.user import User
from invoicehub.app.schemas.invoice_template import (
    InvoiceTemplateCreate,
    InvoiceTemplateRead,
    InvoiceTemplateUpdate,
)

router = APIRouter(prefix="/invoice-templates", tags=["invoice_templates"])


@router.post("/", response_model=InvoiceTemplateRead, status_code=status.HTTP_201_CREATED)
async def create_invoice_template(
    template_in: InvoiceTemplateCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return invoice_template_crud.create(db, obj_in=template_in, owner_id=current_user.id)


@router.get("/", response_model=list[InvoiceTemplateRead])
async def list_invoice_templates(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return invoice_template_crud.get_multi(db, owner_id=current_user.id)


@router.post("/seed")
async def seed_invoice_templates(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    created = ensure_system_templates(db)
    return {"message": "System templates seeded", "created": created}


@router.get("/{template_id}", response_model=InvoiceTemplateRead)
async def get_invoice_template(template_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    template = invoice_template_crud.get(db, template_id=template_id, owner_id=current_user.id)
    if not template:
        raise NotFoundError("Invoice template")
    return template


@router.put("/{template_id}", response_model=InvoiceTemplateRead)
async def update_invoice_template(
    template_id: int,
    template_in: InvoiceTemplateUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    template = invoice_template_crud.get(db, template_id=template_id, owner_id=current_user.id)
    if not template:
        raise NotFoundError("Invoice template")
    return invoice_template_crud.update(db, db_obj=template, obj_in=template_in)


@router.delete("/{template_id}")
async def delete_invoice_template(template_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    template = invoice_template_crud.get(db, template_id=template_id, owner_id=current_user.id)
    if not template:
        raise NotFoundError("Invoice template")
    invoice_template_crud.delete(db, db_obj=template)
    return {"message": "Invoice template deleted successfully"}
