"""Invoice schemas."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.invoicing.schemas.invoice_item import InvoiceItemCreate, InvoiceItemRead
from backend.invoicing.services.payment_status import PaymentStatus


class InvoiceCreate(BaseModel):
    customer_id: int
    issuer_id: Optional[int] = None
    place_of_supply: str
    reverse_charge: bool = False
    payment_method: Optional[str] = Field(default=None, max_length=50)
    due_date: Optional[datetime] = None
    items: List[InvoiceItemCreate]


class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus
    payment_reference: Optional[str] = Field(default=None, max_length=255)


class InvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_number: str
    invoice_date: datetime
    due_date: datetime

    customer_id: int
    customer_name: str
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    customer_address: Optional[str] = None
    customer_registration_number: Optional[str] = None

    issuer_id: Optional[int] = None
    issuer_name: str
    issuer_address: Optional[str] = None
    issuer_registration_number: str

    subtotal: Decimal
    cgst_total: Decimal
    sgst_total: Decimal
    igst_total: Decimal
    cess_total: Decimal
    grand_total: Decimal

    place_of_supply: str
    reverse_charge: bool
    payment_status: PaymentStatus
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None

    created_at: datetime
    updated_at: datetime

    items: List[InvoiceItemRead] = []


class InvoiceCreateResult(BaseModel):
    invoice: InvoiceRead
    warnings: List[str] = []


class IdentifierCheckRead(BaseModel):
    value: Optional[str] = None
    valid: bool
    reason: Optional[str] = None
    advisory: bool = False
