from datetime import datetime, timezone
from decimal import Decimal

from backend.invoicing.schemas.invoice import InvoiceRead
from backend.invoicing.services.rendering import render_invoice_html, render_invoice_text


def _invoice(**overrides) -> InvoiceRead:
    now = datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc)
    data = dict(
        id=1,
        invoice_number="INV-20261019T100000000000-000001-ABCDEF",
        invoice_date=now,
        due_date=datetime(2026, 11, 18, tzinfo=timezone.utc),
        customer_id=2,
        customer_name="Asha Traders",
        customer_address="4 Residency Road, Bengaluru",
        customer_registration_number=None,
        issuer_id=1,
        issuer_name="Kaveri Supplies",
        issuer_address="12 MG Road, Bengaluru",
        issuer_registration_number="29ABCDE1234F1Z5",
        subtotal=Decimal("100.00"),
        cgst_total=Decimal("9.00"),
        sgst_total=Decimal("9.00"),
        igst_total=Decimal("0.00"),
        cess_total=Decimal("0.00"),
        # stored value is printed as-is
        grand_total=Decimal("999.99"),
        place_of_supply="29",
        reverse_charge=False,
        payment_status="PENDING",
        created_at=now,
        updated_at=now,
        items=[
            dict(
                id=10,
                invoice_id=1,
                position=0,
                description="Consulting",
                sac_code="9983",
                quantity=Decimal("2.000"),
                unit_price=Decimal("50.00"),
                discount=Decimal("0.00"),
                cgst_rate=Decimal("9.000"),
                sgst_rate=Decimal("9.000"),
                igst_rate=Decimal("0.000"),
                cess_rate=Decimal("0.000"),
                taxable_amount=Decimal("100.00"),
                cgst_amount=Decimal("9.00"),
                sgst_amount=Decimal("9.00"),
                igst_amount=Decimal("0.00"),
                cess_amount=Decimal("0.00"),
                total_amount=Decimal("118.00"),
            )
        ],
    )
    data.update(overrides)
    return InvoiceRead.model_validate(data)


def test_html_prints_stored_totals_without_recomputing():
    html = render_invoice_html(_invoice())
    assert "₹999.99" in html
    assert "₹118.00" not in html.split('<table class="totals-table">', 1)[1]
    assert "<td>9983</td>" in html
    assert "@9%" in html
    assert "Reverse Charge: No" in html
    assert "Payment Status: PENDING" in html
    assert "Date: 19-10-2026" in html


def test_html_shows_customer_gstin_only_when_present():
    assert "GSTIN: 27AAPFU0939F1ZV" in render_invoice_html(_invoice(customer_registration_number="27AAPFU0939F1ZV"))
    assert render_invoice_html(_invoice()).count("GSTIN:") == 1


def test_text_rendition_lists_items_and_totals():
    text = render_invoice_text(_invoice(reverse_charge=True), currency_symbol="Rs.")
    assert "1. Consulting [9983] 2 x Rs.50.00 - Rs.0.00 = Rs.100.00" in text
    assert "Total Amount: Rs.999.99" in text
    assert "Reverse Charge: Yes" in text
