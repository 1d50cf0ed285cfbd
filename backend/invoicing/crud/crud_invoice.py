"""Persistence operations for invoices and their items."""

import logging
from contextlib import contextmanager
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, selectinload

from backend.invoicing.core.errors import StorageUnavailable
from backend.invoicing.models.invoice import Invoice
from backend.invoicing.utils.retry import retry_with_backoff

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (OperationalError, InterfaceError, PoolTimeoutError)


class InvoiceNumberConflict(Exception):
    """The unique index rejected an invoice number another writer already took."""


@contextmanager
def storage_guard(db: Session, operation: str):
    try:
        yield
    except TRANSIENT_ERRORS as exc:
        db.rollback()
        logger.error("Storage unavailable during %s: %s", operation, exc)
        raise StorageUnavailable(f"Storage unavailable during {operation}") from exc


class CRUDInvoice:
    def create_with_items(self, db: Session, *, invoice: Invoice) -> Invoice:
        """Insert an invoice and all of its items in one transaction."""
        with storage_guard(db, "invoice insert"):
            try:
                db.add(invoice)
                db.flush()
                db.commit()
            except IntegrityError as exc:
                db.rollback()
                if "invoice_number" in str(exc.orig):
                    raise InvoiceNumberConflict(invoice.invoice_number) from exc
                raise
            except Exception:
                db.rollback()
                raise
        db.refresh(invoice)
        return invoice

    @retry_with_backoff(exceptions=(StorageUnavailable,))
    def get(self, db: Session, *, invoice_id: int) -> Optional[Invoice]:
        with storage_guard(db, "invoice read"):
            return (
                db.query(Invoice)
                .options(selectinload(Invoice.items))
                .filter(Invoice.id == invoice_id)
                .first()
            )

    @retry_with_backoff(exceptions=(StorageUnavailable,))
    def list_for_customer(self, db: Session, *, customer_id: int) -> List[Invoice]:
        with storage_guard(db, "invoice list"):
            return (
                db.query(Invoice)
                .options(selectinload(Invoice.items))
                .filter(Invoice.customer_id == customer_id)
                .order_by(Invoice.created_at.desc(), Invoice.id.desc())
                .all()
            )

    @retry_with_backoff(exceptions=(StorageUnavailable,))
    def number_exists(self, db: Session, *, invoice_number: str) -> bool:
        with storage_guard(db, "invoice number check"):
            return db.query(Invoice.id).filter(Invoice.invoice_number == invoice_number).first() is not None

    def update_payment_fields(
        self,
        db: Session,
        *,
        db_obj: Invoice,
        payment_status: str,
        payment_reference: Optional[str] = None,
    ) -> Invoice:
        """Only status fields are writable once an invoice exists."""
        with storage_guard(db, "invoice status update"):
            db_obj.payment_status = payment_status
            if payment_reference is not None:
                db_obj.payment_reference = payment_reference
            db.commit()
            db.refresh(db_obj)
        return db_obj


invoice_crud = CRUDInvoice()
