"""Invoice template schemas."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class InvoiceTemplateBase(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    category: str = "custom"
    preview_url: Optional[str] = None
    styles: Dict[str, Any]
    sample_data: Optional[Dict[str, Any]] = None


class InvoiceTemplateCreate(InvoiceTemplateBase):
    pass


class InvoiceTemplateUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    category: Optional[str] = None
    preview_url: Optional[str] = None
    styles: Optional[Dict[str, Any]] = None
    sample_data: Optional[Dict[str, Any]] = None


class InvoiceTemplateRead(InvoiceTemplateBase):
    id: int
    owner_id: Optional[int] = None
    is_default: bool
    is_system: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
