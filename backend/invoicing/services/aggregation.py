"""Invoice-level totals and their reconciliation check."""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from backend.invoicing.core.errors import ReconciliationError
from backend.invoicing.schemas.invoice_item import InvoiceItemComputed

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = Decimal("0.01")


@dataclass(frozen=True)
class InvoiceTotals:
    subtotal: Decimal
    cgst_total: Decimal
    sgst_total: Decimal
    igst_total: Decimal
    cess_total: Decimal
    grand_total: Decimal

    @property
    def tax_total(self) -> Decimal:
        return self.cgst_total + self.sgst_total + self.igst_total + self.cess_total


def verify_reconciliation(totals: InvoiceTotals, tolerance: Decimal = DEFAULT_TOLERANCE) -> None:
    """Raise ReconciliationError if grand total != subtotal + tax components."""
    expected = totals.subtotal + totals.tax_total
    difference = abs(totals.grand_total - expected)
    if difference > tolerance:
        logger.error(
            "Invoice totals do not reconcile: grand_total=%s expected=%s difference=%s",
            totals.grand_total,
            expected,
            difference,
        )
        raise ReconciliationError(
            f"Grand total {totals.grand_total} does not match subtotal plus taxes {expected} "
            f"(difference {difference}, tolerance {tolerance})"
        )


def aggregate_invoice_totals(
    items: Iterable[InvoiceItemComputed], tolerance: Decimal = DEFAULT_TOLERANCE
) -> InvoiceTotals:
    zero = Decimal("0.00")
    subtotal = cgst = sgst = igst = cess = grand = zero
    for item in items:
        subtotal += item.taxable_amount
        cgst += item.cgst_amount
        sgst += item.sgst_amount
        igst += item.igst_amount
        cess += item.cess_amount
        grand += item.total_amount

    totals = InvoiceTotals(
        subtotal=subtotal,
        cgst_total=cgst,
        sgst_total=sgst,
        igst_total=igst,
        cess_total=cess,
        grand_total=grand,
    )
    verify_reconciliation(totals, tolerance)
    return totals
