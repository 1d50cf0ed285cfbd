"""Invoice line item with its computed GST components."""

from sqlalchemy import Column, ForeignKey, Integer, Numeric, String
from sqlalchemy.orm import relationship

from backend.invoicing.db.base_class import Base


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)

    description = Column(String(255), nullable=False)
    hsn_code = Column(String(8), nullable=True)
    sac_code = Column(String(8), nullable=True)
    quantity = Column(Numeric(12, 3), nullable=False)
    unit_price = Column(Numeric(14, 2), nullable=False)
    discount = Column(Numeric(14, 2), nullable=False, default=0)

    cgst_rate = Column(Numeric(6, 3), nullable=False, default=0)
    sgst_rate = Column(Numeric(6, 3), nullable=False, default=0)
    igst_rate = Column(Numeric(6, 3), nullable=False, default=0)
    cess_rate = Column(Numeric(6, 3), nullable=False, default=0)

    taxable_amount = Column(Numeric(14, 2), nullable=False)
    cgst_amount = Column(Numeric(14, 2), nullable=False, default=0)
    sgst_amount = Column(Numeric(14, 2), nullable=False, default=0)
    igst_amount = Column(Numeric(14, 2), nullable=False, default=0)
    cess_amount = Column(Numeric(14, 2), nullable=False, default=0)
    total_amount = Column(Numeric(14, 2), nullable=False)

    invoice = relationship("Invoice", back_populates="items")
