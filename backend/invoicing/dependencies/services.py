"""Request-scoped service construction for the HTTP layer."""

from fastapi import Depends
from sqlalchemy.orm import Session

from backend.invoicing.core.settings import Settings, get_settings
from backend.invoicing.db.session import get_db
from backend.invoicing.services.invoice_service import InvoiceService


def get_invoice_service(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> InvoiceService:
    return InvoiceService(db, settings)
