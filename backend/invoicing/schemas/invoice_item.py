"""Invoice item schemas."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class InvoiceItemBase(BaseModel):
    description: str = Field(min_length=1, max_length=255)
    hsn_code: Optional[str] = Field(default=None, max_length=8)
    sac_code: Optional[str] = Field(default=None, max_length=8)
    # Scales match the item columns so the stored inputs reproduce the stored amounts.
    quantity: Decimal = Field(gt=0, max_digits=12, decimal_places=3)
    unit_price: Decimal = Field(ge=0, max_digits=14, decimal_places=2)
    discount: Decimal = Field(default=Decimal("0"), ge=0, max_digits=14, decimal_places=2)
    cgst_rate: Decimal = Field(default=Decimal("0"), ge=0, max_digits=6, decimal_places=3)
    sgst_rate: Decimal = Field(default=Decimal("0"), ge=0, max_digits=6, decimal_places=3)
    igst_rate: Decimal = Field(default=Decimal("0"), ge=0, max_digits=6, decimal_places=3)
    cess_rate: Decimal = Field(default=Decimal("0"), ge=0, max_digits=6, decimal_places=3)

    @property
    def classification_code(self) -> Optional[str]:
        return self.hsn_code or self.sac_code


class InvoiceItemCreate(InvoiceItemBase):
    pass


class InvoiceItemComputed(InvoiceItemBase):
    """A line item with its taxable amount and applied GST components."""

    taxable_amount: Decimal
    cgst_amount: Decimal
    sgst_amount: Decimal
    igst_amount: Decimal
    cess_amount: Decimal
    total_amount: Decimal


class InvoiceItemRead(InvoiceItemComputed):
    model_config = ConfigDict(from_attributes=True)

    id: int
    invoice_id: int
    position: int
