"""GST tax invoice model."""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from backend.invoicing.core.time import utc_now
from backend.invoicing.db.base_class import Base


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    invoice_number = Column(String(64), nullable=False, unique=True, index=True)
    issuer_id = Column(Integer, ForeignKey("parties.id"), nullable=True, index=True)
    customer_id = Column(Integer, ForeignKey("parties.id"), nullable=False, index=True)

    invoice_date = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    due_date = Column(DateTime(timezone=True), nullable=False)

    # Party snapshot taken at creation
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(50), nullable=True)
    customer_address = Column(Text, nullable=True)
    customer_registration_number = Column(String(15), nullable=True)
    issuer_name = Column(String(255), nullable=False)
    issuer_address = Column(Text, nullable=True)
    issuer_registration_number = Column(String(15), nullable=False)

    subtotal = Column(Numeric(14, 2), nullable=False, default=0)
    cgst_total = Column(Numeric(14, 2), nullable=False, default=0)
    sgst_total = Column(Numeric(14, 2), nullable=False, default=0)
    igst_total = Column(Numeric(14, 2), nullable=False, default=0)
    cess_total = Column(Numeric(14, 2), nullable=False, default=0)
    grand_total = Column(Numeric(14, 2), nullable=False, default=0)

    place_of_supply = Column(String(2), nullable=False)
    reverse_charge = Column(Boolean, nullable=False, default=False)

    payment_status = Column(String(20), nullable=False, default="DRAFT")
    payment_method = Column(String(50), nullable=True)
    payment_reference = Column(String(255), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)

    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.position",
    )
    customer = relationship("Party", foreign_keys=[customer_id])
    issuer = relationship("Party", foreign_keys=[issuer_id])
