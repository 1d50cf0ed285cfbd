"""Typed errors raised by the invoicing core.

Every error carries a machine-readable ``code`` and the HTTP status the API
layer answers with, so callers catch by type and never parse messages.

    InvoicingError
    +-- ValidationFailed
    |   +-- InvalidItem
    +-- IssuerNotConfigured
    +-- ReconciliationError
    +-- InvalidStatusTransition
    +-- NumberGenerationExhausted
    +-- NotFound
    +-- StorageUnavailable
"""

from typing import Iterable, Optional


class InvoicingError(Exception):
    code = "INVOICING_ERROR"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(InvoicingError):
    """Input problems, collected exhaustively before anything is persisted."""

    code = "VALIDATION_FAILED"
    http_status = 422

    def __init__(self, errors: Iterable[str], message: str = "Invoice request failed validation"):
        self.errors = list(errors)
        super().__init__(f"{message}: {'; '.join(self.errors)}" if self.errors else message)


class InvalidItem(ValidationFailed):
    code = "INVALID_ITEM"

    def __init__(self, reason: str, index: Optional[int] = None):
        self.index = index
        self.reason = reason
        label = f"Item {index + 1}: {reason}" if index is not None else reason
        super().__init__([label], message="Invalid line item")


class IssuerNotConfigured(InvoicingError):
    """The issuing entity has no usable registration number. Needs an operator."""

    code = "ISSUER_NOT_CONFIGURED"
    http_status = 500


class ReconciliationError(InvoicingError):
    """Invoice totals do not reconcile with their items; a calculator bug."""

    code = "RECONCILIATION_ERROR"
    http_status = 500


class InvalidStatusTransition(InvoicingError):
    code = "INVALID_STATUS_TRANSITION"
    http_status = 409

    def __init__(self, current: str, requested: str, reason: Optional[str] = None):
        self.current = current
        self.requested = requested
        message = f"Cannot move invoice from {current} to {requested}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class NumberGenerationExhausted(InvoicingError):
    code = "NUMBER_GENERATION_EXHAUSTED"
    http_status = 503

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Could not allocate a unique invoice number after {attempts} attempts")


class NotFound(InvoicingError):
    code = "NOT_FOUND"
    http_status = 404

    def __init__(self, entity: str, identifier):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} {identifier} not found")


class StorageUnavailable(InvoicingError):
    code = "STORAGE_UNAVAILABLE"
    http_status = 503
