"""Payment-status lifecycle for invoices."""

from enum import Enum
from typing import Optional

from backend.invoicing.core.errors import InvalidStatusTransition


class PaymentStatus(str, Enum):
    DRAFT = "DRAFT"
    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


ALLOWED_TRANSITIONS = {
    PaymentStatus.DRAFT: {PaymentStatus.PENDING, PaymentStatus.CANCELLED},
    PaymentStatus.PENDING: {PaymentStatus.PAID, PaymentStatus.CANCELLED},
    PaymentStatus.PAID: set(),
    PaymentStatus.CANCELLED: set(),
}

TERMINAL_STATUSES = frozenset(status for status, targets in ALLOWED_TRANSITIONS.items() if not targets)


def apply_status_transition(
    current: PaymentStatus | str,
    requested: PaymentStatus | str,
    payment_reference: Optional[str] = None,
) -> PaymentStatus:
    """Validate a transition and return the new status.

    PAID requires a non-blank payment reference; CANCELLED does not.
    """
    current_status = PaymentStatus(current)
    try:
        requested_status = PaymentStatus(requested)
    except ValueError:
        raise InvalidStatusTransition(current_status.value, str(requested), "unknown status")

    if requested_status not in ALLOWED_TRANSITIONS[current_status]:
        reason = "status is terminal" if current_status in TERMINAL_STATUSES else None
        raise InvalidStatusTransition(current_status.value, requested_status.value, reason)

    if requested_status is PaymentStatus.PAID and not (payment_reference and payment_reference.strip()):
        raise InvalidStatusTransition(
            current_status.value, requested_status.value, "a payment reference is required"
        )
    return requested_status
