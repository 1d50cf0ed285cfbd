"""Payment reference source consulted when an invoice is marked paid."""

from typing import Mapping, Optional, Protocol


class PaymentReferenceSource(Protocol):
    def reference_for(self, invoice_number: str) -> Optional[str]: ...


class StaticPaymentReferenceSource:
    """Looks references up in a fixed mapping; the default knows none."""

    def __init__(self, references: Optional[Mapping[str, str]] = None):
        self._references = dict(references or {})

    def reference_for(self, invoice_number: str) -> Optional[str]:
        return self._references.get(invoice_number)
