"""Invoice orchestration: validation, tax computation, numbering and persistence.

A service instance is built per request (or per process) with its settings and
collaborators passed in explicitly.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, List, Optional

from sqlalchemy.orm import Session

from backend.invoicing.core.errors import (
    InvalidItem,
    IssuerNotConfigured,
    NotFound,
    NumberGenerationExhausted,
    ValidationFailed,
)
from backend.invoicing.core.jurisdictions import normalize_place_of_supply
from backend.invoicing.core.settings import Settings
from backend.invoicing.core.time import utc_now
from backend.invoicing.crud.crud_invoice import CRUDInvoice, InvoiceNumberConflict, invoice_crud
from backend.invoicing.models.invoice import Invoice
from backend.invoicing.models.invoice_item import InvoiceItem
from backend.invoicing.schemas.invoice import InvoiceCreate, InvoiceCreateResult, InvoiceRead
from backend.invoicing.schemas.invoice_item import InvoiceItemComputed
from backend.invoicing.schemas.party import PartyRecord
from backend.invoicing.services.aggregation import InvoiceTotals, aggregate_invoice_totals
from backend.invoicing.services.identifiers import (
    jurisdiction_of,
    validate_classification_code,
    validate_registration_number,
)
from backend.invoicing.services.invoice_numbers import InvoiceNumberGenerator, get_invoice_number_generator
from backend.invoicing.services.parties import PartyDirectory, SqlPartyDirectory
from backend.invoicing.services.payment_status import PaymentStatus, apply_status_transition
from backend.invoicing.services.payments import PaymentReferenceSource, StaticPaymentReferenceSource
from backend.invoicing.services.rendering import render_invoice_html, render_invoice_text
from backend.invoicing.services.tax_calculator import calculate_line_item, rate_warnings

logger = logging.getLogger(__name__)

DOCUMENT_FORMATS = ("html", "text")


class InvoiceService:
    def __init__(
        self,
        db: Session,
        settings: Settings,
        *,
        party_directory: Optional[PartyDirectory] = None,
        payment_references: Optional[PaymentReferenceSource] = None,
        number_generator: Optional[InvoiceNumberGenerator] = None,
        crud: CRUDInvoice = invoice_crud,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.settings = settings
        self.party_directory = party_directory or SqlPartyDirectory(db)
        self.payment_references = payment_references or StaticPaymentReferenceSource()
        self.number_generator = number_generator or get_invoice_number_generator(settings.invoice_number_prefix)
        self.crud = crud
        self.clock = clock

    # -- creation -------------------------------------------------------------

    def _resolve_issuer(self, issuer_id: Optional[int]) -> PartyRecord:
        issuer = self.party_directory.get_issuer(issuer_id if issuer_id is not None else self.settings.default_issuer_id)
        if issuer is None or not issuer.registration_number:
            logger.critical("No issuer with a registration number is configured (issuer_id=%s)", issuer_id)
            raise IssuerNotConfigured("Issuing business has no GST registration number configured")
        check = validate_registration_number(issuer.registration_number)
        if not check.valid:
            logger.critical("Issuer %s has an unusable registration number: %s", issuer.id, check.reason)
            raise IssuerNotConfigured(f"Issuer registration number is invalid: {check.reason}")
        return issuer

    def create_invoice(self, request: InvoiceCreate) -> InvoiceCreateResult:
        """Validate, compute and persist an invoice with its items as one unit.

        All input problems are collected into a single ValidationFailed before
        anything touches the store. Advisory findings come back as warnings.
        """
        issuer = self._resolve_issuer(request.issuer_id)
        errors: List[str] = []
        warnings: List[str] = []

        customer = self.party_directory.get_customer(request.customer_id)
        if customer is None:
            errors.append(f"Customer {request.customer_id} not found")
        elif customer.registration_number:
            check = validate_registration_number(customer.registration_number)
            if not check.valid:
                errors.append(f"Customer registration number: {check.reason}")

        place_of_supply = normalize_place_of_supply(request.place_of_supply)
        if place_of_supply is None:
            errors.append(f"Unknown place of supply '{request.place_of_supply}'")
        intra_state = place_of_supply == jurisdiction_of(issuer.registration_number)

        if not request.items:
            errors.append("Invoice must contain at least one item")

        computed: List[InvoiceItemComputed] = []
        for index, item in enumerate(request.items):
            code_check = validate_classification_code(item.classification_code)
            if not code_check.valid:
                warnings.append(f"Item {index + 1}: {code_check.reason}")
            warnings.extend(rate_warnings(item, intra_state=intra_state, index=index))
            try:
                computed.append(calculate_line_item(item, intra_state=intra_state, index=index))
            except InvalidItem as exc:
                errors.extend(exc.errors)

        if errors:
            logger.warning("Invoice request rejected with %d error(s): %s", len(errors), "; ".join(errors))
            raise ValidationFailed(errors)

        totals = aggregate_invoice_totals(computed, tolerance=self.settings.reconciliation_tolerance)
        invoice = self._persist(request, issuer, customer, place_of_supply, computed, totals)

        logger.info(
            "Created invoice %s for customer %s: grand_total=%s items=%d",
            invoice.invoice_number,
            customer.id,
            invoice.grand_total,
            len(computed),
        )
        return InvoiceCreateResult(invoice=InvoiceRead.model_validate(invoice), warnings=warnings)

    def _persist(
        self,
        request: InvoiceCreate,
        issuer: PartyRecord,
        customer: PartyRecord,
        place_of_supply: str,
        items: List[InvoiceItemComputed],
        totals: InvoiceTotals,
    ) -> Invoice:
        invoice_date = self.clock()
        due_date = request.due_date or invoice_date + timedelta(days=self.settings.default_due_days)
        max_attempts = self.settings.invoice_number_max_attempts

        # Existence-check collisions and store rejections draw from one attempt budget.
        for attempt in range(1, max_attempts + 1):
            number = self.number_generator.candidate()
            if self.crud.number_exists(self.db, invoice_number=number):
                logger.warning("Invoice number collision on %s (attempt %d/%d)", number, attempt, max_attempts)
                continue
            invoice = Invoice(
                invoice_number=number,
                issuer_id=issuer.id,
                customer_id=customer.id,
                invoice_date=invoice_date,
                due_date=due_date,
                customer_name=customer.name,
                customer_email=customer.email,
                customer_phone=customer.phone,
                customer_address=customer.formatted_address,
                customer_registration_number=customer.registration_number,
                issuer_name=issuer.name,
                issuer_address=issuer.formatted_address,
                issuer_registration_number=issuer.registration_number,
                subtotal=totals.subtotal,
                cgst_total=totals.cgst_total,
                sgst_total=totals.sgst_total,
                igst_total=totals.igst_total,
                cess_total=totals.cess_total,
                grand_total=totals.grand_total,
                place_of_supply=place_of_supply,
                reverse_charge=request.reverse_charge,
                payment_status=PaymentStatus.DRAFT.value,
                payment_method=request.payment_method,
                items=[
                    InvoiceItem(position=position, **item.model_dump())
                    for position, item in enumerate(items)
                ],
            )
            try:
                return self.crud.create_with_items(self.db, invoice=invoice)
            except InvoiceNumberConflict:
                logger.warning(
                    "Invoice number %s rejected by the store (attempt %d/%d)", number, attempt, max_attempts
                )
        raise NumberGenerationExhausted(max_attempts)

    # -- reads ----------------------------------------------------------------

    def _get_model(self, invoice_id: int) -> Invoice:
        invoice = self.crud.get(self.db, invoice_id=invoice_id)
        if invoice is None:
            raise NotFound("Invoice", invoice_id)
        return invoice

    def get_invoice(self, invoice_id: int) -> InvoiceRead:
        return InvoiceRead.model_validate(self._get_model(invoice_id))

    def list_invoices_for_customer(self, customer_id: int) -> List[InvoiceRead]:
        """Invoices for a customer, newest first."""
        invoices = self.crud.list_for_customer(self.db, customer_id=customer_id)
        return [InvoiceRead.model_validate(invoice) for invoice in invoices]

    # -- lifecycle ------------------------------------------------------------

    def update_payment_status(
        self,
        invoice_id: int,
        new_status: PaymentStatus | str,
        payment_reference: Optional[str] = None,
    ) -> InvoiceRead:
        invoice = self._get_model(invoice_id)
        if new_status == PaymentStatus.PAID and not payment_reference:
            payment_reference = self.payment_references.reference_for(invoice.invoice_number)

        previous = invoice.payment_status
        status = apply_status_transition(previous, new_status, payment_reference)
        invoice = self.crud.update_payment_fields(
            self.db,
            db_obj=invoice,
            payment_status=status.value,
            payment_reference=payment_reference if status is PaymentStatus.PAID else None,
        )
        logger.info("Invoice %s moved from %s to %s", invoice.invoice_number, previous, status.value)
        return InvoiceRead.model_validate(invoice)

    # -- rendering ------------------------------------------------------------

    def render_document(self, invoice_id: int, fmt: str = "html") -> str:
        if fmt not in DOCUMENT_FORMATS:
            raise ValidationFailed([f"Unsupported document format '{fmt}'"])
        invoice = self.get_invoice(invoice_id)
        if fmt == "text":
            return render_invoice_text(invoice, currency_symbol=self.settings.currency_symbol)
        return render_invoice_html(invoice, currency_symbol=self.settings.currency_symbol)
