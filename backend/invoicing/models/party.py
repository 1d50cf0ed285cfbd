"""Party model: customers and issuing businesses."""

from sqlalchemy import Column, DateTime, Integer, String

from backend.invoicing.core.time import utc_now
from backend.invoicing.db.base_class import Base

PARTY_KIND_CUSTOMER = "customer"
PARTY_KIND_ISSUER = "issuer"


class Party(Base):
    __tablename__ = "parties"

    id = Column(Integer, primary_key=True, index=True)
    kind = Column(String(20), nullable=False, index=True, default=PARTY_KIND_CUSTOMER)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    address_line1 = Column(String(255), nullable=True)
    address_line2 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    pincode = Column(String(20), nullable=True)
    registration_number = Column(String(15), nullable=True)

    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utc_now, onupdate=utc_now, nullable=False)
