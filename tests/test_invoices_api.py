import pytest
from decimal import Decimal
from fastapi.testclient import TestClient

from backend.invoicing.db.base import Base
from backend.invoicing.db.session import SessionLocal, engine
from backend.invoicing.main import app
from backend.invoicing.models.party import PARTY_KIND_CUSTOMER, PARTY_KIND_ISSUER, Party


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def create_party(kind: str, name: str, registration_number: str | None = None) -> int:
    db = SessionLocal()
    try:
        party = Party(kind=kind, name=name, city="Bengaluru", registration_number=registration_number)
        db.add(party)
        db.commit()
        db.refresh(party)
        return party.id
    finally:
        db.close()


def invoice_payload(customer_id: int, place_of_supply: str = "29"):
    return {
        "customer_id": customer_id,
        "place_of_supply": place_of_supply,
        "payment_method": "bank_transfer",
        "items": [
            {"description": "Laptop", "hsn_code": "8471", "quantity": 10, "unit_price": 50000,
             "cgst_rate": 9, "sgst_rate": 9},
            {"description": "Router", "hsn_code": "8517", "quantity": 5, "unit_price": 20000,
             "cgst_rate": 9, "sgst_rate": 9},
        ],
    }


def create_invoice(client: TestClient, customer_id: int) -> dict:
    resp = client.post("/invoices/", json=invoice_payload(customer_id))
    assert resp.status_code == 201
    return resp.json()["invoice"]


def test_create_invoice_returns_totals_and_items():
    client = TestClient(app)
    create_party(PARTY_KIND_ISSUER, "Kaveri Supplies", "29ABCDE1234F1Z5")
    customer_id = create_party(PARTY_KIND_CUSTOMER, "Asha Traders")

    resp = client.post("/invoices/", json=invoice_payload(customer_id))
    assert resp.status_code == 201
    body = resp.json()
    invoice = body["invoice"]
    assert body["warnings"] == []
    assert Decimal(invoice["subtotal"]) == Decimal("600000")
    assert Decimal(invoice["cgst_total"]) == Decimal("54000")
    assert Decimal(invoice["sgst_total"]) == Decimal("54000")
    assert Decimal(invoice["igst_total"]) == Decimal("0")
    assert Decimal(invoice["grand_total"]) == Decimal("708000")
    assert invoice["payment_status"] == "DRAFT"
    assert invoice["payment_method"] == "bank_transfer"
    assert len(invoice["items"]) == 2


def test_create_invoice_reports_all_validation_errors():
    client = TestClient(app)
    create_party(PARTY_KIND_ISSUER, "Kaveri Supplies", "29ABCDE1234F1Z5")
    customer_id = create_party(PARTY_KIND_CUSTOMER, "Asha Traders", "BAD-GSTIN")
    payload = invoice_payload(customer_id, place_of_supply="Nowhere")
    payload["items"][1]["discount"] = 200000

    resp = client.post("/invoices/", json=payload)
    assert resp.status_code == 422
    body = resp.json()
    assert body["code"] == "VALIDATION_FAILED"
    assert len(body["errors"]) == 3


def test_schema_violations_are_rejected_before_the_service():
    client = TestClient(app)
    payload = invoice_payload(1)
    payload["items"][0]["quantity"] = 0
    payload["items"][1]["unit_price"] = -5
    resp = client.post("/invoices/", json=payload)
    assert resp.status_code == 422
    body = resp.json()
    assert body["code"] == "VALIDATION_FAILED"
    assert len(body["errors"]) == 2
    assert any(error.startswith("items.0.quantity:") for error in body["errors"])
    assert any(error.startswith("items.1.unit_price:") for error in body["errors"])


def test_quantity_finer_than_stored_precision_is_rejected():
    client = TestClient(app)
    payload = invoice_payload(1)
    payload["items"][0]["quantity"] = "2.0005"
    resp = client.post("/invoices/", json=payload)
    assert resp.status_code == 422
    body = resp.json()
    assert body["code"] == "VALIDATION_FAILED"
    assert body["errors"][0].startswith("items.0.quantity:")


def test_create_without_issuer_is_server_misconfiguration():
    client = TestClient(app)
    customer_id = create_party(PARTY_KIND_CUSTOMER, "Asha Traders")
    resp = client.post("/invoices/", json=invoice_payload(customer_id))
    assert resp.status_code == 500
    assert resp.json()["code"] == "ISSUER_NOT_CONFIGURED"


def test_get_and_list_invoices():
    client = TestClient(app)
    create_party(PARTY_KIND_ISSUER, "Kaveri Supplies", "29ABCDE1234F1Z5")
    customer_id = create_party(PARTY_KIND_CUSTOMER, "Asha Traders")
    first = create_invoice(client, customer_id)
    second = create_invoice(client, customer_id)

    resp = client.get(f"/invoices/{first['id']}")
    assert resp.status_code == 200
    assert resp.json()["invoice_number"] == first["invoice_number"]

    list_resp = client.get("/invoices/", params={"customer_id": customer_id})
    assert list_resp.status_code == 200
    assert [inv["id"] for inv in list_resp.json()] == [second["id"], first["id"]]


def test_get_missing_invoice_is_404():
    client = TestClient(app)
    resp = client.get("/invoices/9999")
    assert resp.status_code == 404
    assert resp.json()["code"] == "NOT_FOUND"


def test_payment_status_transitions_over_http():
    client = TestClient(app)
    create_party(PARTY_KIND_ISSUER, "Kaveri Supplies", "29ABCDE1234F1Z5")
    customer_id = create_party(PARTY_KIND_CUSTOMER, "Asha Traders")
    invoice = create_invoice(client, customer_id)
    url = f"/invoices/{invoice['id']}/payment-status"

    resp = client.patch(url, json={"status": "PENDING"})
    assert resp.status_code == 200
    assert resp.json()["payment_status"] == "PENDING"

    resp = client.patch(url, json={"status": "PAID"})
    assert resp.status_code == 409
    assert resp.json()["code"] == "INVALID_STATUS_TRANSITION"

    resp = client.patch(url, json={"status": "PAID", "payment_reference": "pay_789"})
    assert resp.status_code == 200
    assert resp.json()["payment_reference"] == "pay_789"

    resp = client.patch(url, json={"status": "PENDING"})
    assert resp.status_code == 409

    resp = client.patch(url, json={"status": "FILED"})
    assert resp.status_code == 422


def test_invoice_document_html_and_text():
    client = TestClient(app)
    create_party(PARTY_KIND_ISSUER, "Kaveri Supplies", "29ABCDE1234F1Z5")
    customer_id = create_party(PARTY_KIND_CUSTOMER, "Asha Traders")
    invoice = create_invoice(client, customer_id)

    resp = client.get(f"/invoices/{invoice['id']}/document")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert invoice["invoice_number"] in resp.text

    resp = client.get(f"/invoices/{invoice['id']}/document", params={"format": "text"})
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/plain")
    assert "TAX INVOICE" in resp.text

    resp = client.get(f"/invoices/{invoice['id']}/document", params={"format": "pdf"})
    assert resp.status_code == 422


def test_identifier_check_endpoints():
    client = TestClient(app)
    resp = client.get("/identifiers/registration-number/29ABCDE1234F1Z5")
    assert resp.status_code == 200
    assert resp.json()["valid"] is True

    resp = client.get("/identifiers/registration-number/29ABCDE1234F1Z")
    assert resp.json()["valid"] is False
    assert resp.json()["reason"]

    resp = client.get("/identifiers/classification-code/99")
    body = resp.json()
    assert body["valid"] is False
    assert body["advisory"] is True
