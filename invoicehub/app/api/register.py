"""Handles user registration for InvoiceHub."""

import structlog
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from invoicehub.app.core.security import get_password_hash
from invoicehub.app.core.settings import get_settings
from invoicehub.app.db.session import get_db
from invoicehub.app.models.user import User
from invoicehub.app.schemas.user import UserCreate, UserRead

LOGGER = structlog.get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserRead)
def register_user(user_in: UserCreate, db: Session = Depends(get_db)):
    existing = db.query(User).filter(User.email == user_in.email).first()
    if existing:
        raise HTTPException(status_code=400, detail="Email already registered")
    settings = get_settings()
    hashed_password = get_password_hash(user_in.password)  # Hash password before storing
    user = User(
        email=user_in.email,
        hashed_password=hashed_password,
        name=user_in.name,
        invoice_prefix=settings.default_invoice_prefix,
        next_invoice_num=1,
        default_currency=settings.default_currency,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    LOGGER.info("user_registered", user_id=user.id)
    return user
