"""Invoice routes."""

from typing import List

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import HTMLResponse, PlainTextResponse

from backend.invoicing.dependencies.services import get_invoice_service
from backend.invoicing.schemas.invoice import (
    InvoiceCreate,
    InvoiceCreateResult,
    InvoiceRead,
    PaymentStatusUpdate,
)
from backend.invoicing.services.invoice_service import InvoiceService

router = APIRouter(prefix="/invoices", tags=["invoices"])


@router.post("/", response_model=InvoiceCreateResult, status_code=status.HTTP_201_CREATED)
def create_invoice(payload: InvoiceCreate, service: InvoiceService = Depends(get_invoice_service)):
    return service.create_invoice(payload)


@router.get("/", response_model=List[InvoiceRead])
def list_invoices(customer_id: int, service: InvoiceService = Depends(get_invoice_service)):
    return service.list_invoices_for_customer(customer_id)


@router.get("/{invoice_id}", response_model=InvoiceRead)
def get_invoice(invoice_id: int, service: InvoiceService = Depends(get_invoice_service)):
    return service.get_invoice(invoice_id)


@router.patch("/{invoice_id}/payment-status", response_model=InvoiceRead)
def update_payment_status(
    invoice_id: int,
    payload: PaymentStatusUpdate,
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.update_payment_status(invoice_id, payload.status, payload.payment_reference)


@router.get("/{invoice_id}/document")
def get_invoice_document(
    invoice_id: int,
    fmt: str = Query(default="html", alias="format", pattern="^(html|text)$"),
    service: InvoiceService = Depends(get_invoice_service),
):
    body = service.render_document(invoice_id, fmt=fmt)
    if fmt == "text":
        return PlainTextResponse(body)
    return HTMLResponse(body)
