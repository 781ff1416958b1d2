from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, func
from sqlalchemy.orm import relationship

from invoicehub.app.db.base_class import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    name = Column(String(255), nullable=True)
    business_name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    tax_id = Column(String(100), nullable=True)
    invoice_prefix = Column(String(10), nullable=False, default="INV")
    next_invoice_num = Column(Integer, nullable=False, default=1)
    default_currency = Column(String(3), nullable=False, default="USD")
    logo_url = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    clients = relationship("Client", back_populates="owner", cascade="all, delete-orphan", foreign_keys="Client.owner_id")
    invoices = relationship("Invoice", back_populates="owner", cascade="all, delete-orphan", foreign_keys="Invoice.owner_id")
    invoice_templates = relationship(
        "InvoiceTemplate", back_populates="owner", cascade="all, delete-orphan", foreign_keys="InvoiceTemplate.owner_id"
    )
