"""User schemas used for registration, settings and responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(min_length=8)
    name: Optional[str] = Field(default=None, min_length=2)


class UserRead(BaseModel):
    id: int
    email: EmailStr
    name: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class UserSettingsUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2)
    business_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    tax_id: Optional[str] = None
    invoice_prefix: Optional[str] = Field(default=None, min_length=1, max_length=3)
    default_currency: Optional[str] = Field(default=None, pattern=r"^[A-Z]{3}$")


class UserSettingsRead(BaseModel):
    id: int
    email: EmailStr
    name: Optional[str] = None
    business_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    tax_id: Optional[str] = None
    invoice_prefix: str
    next_invoice_num: int
    default_currency: str
    logo_url: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
