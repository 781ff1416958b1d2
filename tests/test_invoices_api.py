from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from invoicehub.app.db.base import Base
from invoicehub.app.db.session import SessionLocal, engine
from invoicehub.app.main import app
from invoicehub.app.models.invoice import Invoice
from invoicehub.app.models.invoice_item import InvoiceItem
from invoicehub.app.models.user import User
from invoicehub.app.services.invoice_pdf import build_pdf_invoice


@pytest.fixture(autouse=True)
def setup_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


def register_and_login(client: TestClient, email: str, password: str = "secret123") -> str:
    client.post("/auth/register", json={"email": email, "password": password})
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200
    return resp.json()["access_token"]


def auth(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def create_client(client: TestClient, token: str, name: str = "Acme Corp") -> int:
    resp = client.post("/clients", json={"name": name, "email": "billing@acme.test"}, headers=auth(token))
    assert resp.status_code == 201
    return resp.json()["id"]


def invoice_payload(client_id: int, **overrides) -> dict:
    payload = {
        "client_id": client_id,
        "issue_date": "2024-06-01",
        "due_date": "2024-07-01",
        "tax_rate": 10,
        "items": [
            {"description": "Consulting", "quantity": 2, "unit_price": "50.00"},
            {"description": "Setup fee", "quantity": 1, "unit_price": "100.00"},
        ],
    }
    payload.update(overrides)
    return payload


def create_invoice(client: TestClient, token: str, client_id: int, **overrides) -> dict:
    resp = client.post("/invoices", json=invoice_payload(client_id, **overrides), headers=auth(token))
    assert resp.status_code == 201, resp.text
    return resp.json()


def set_status(client: TestClient, token: str, invoice_id: int, status: str):
    return client.patch(f"/invoices/{invoice_id}/status", json={"status": status}, headers=auth(token))


def test_create_invoice_numbers_and_totals():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com")
    client_id = create_client(client, token)

    data = create_invoice(client, token, client_id)
    assert data["invoice_number"] == "INV0001"
    assert data["status"] == "DRAFT"
    assert Decimal(data["subtotal"]) == Decimal("200.00")
    assert Decimal(data["tax_amount"]) == Decimal("20.00")
    assert Decimal(data["total"]) == Decimal("220.00")
    assert data["currency"] == "USD"
    assert len(data["items"]) == 2
    assert data["client"]["name"] == "Acme Corp"

    second = create_invoice(client, token, client_id)
    assert second["invoice_number"] == "INV0002"


def test_numbering_is_per_user_and_uses_prefix():
    client = TestClient(app)
    token_a = register_and_login(client, "a@example.com")
    token_b = register_and_login(client, "b@example.com")
    client.put("/settings/profile", json={"invoice_prefix": "AC"}, headers=auth(token_a))

    first_a = create_invoice(client, token_a, create_client(client, token_a))
    first_b = create_invoice(client, token_b, create_client(client, token_b))
    assert first_a["invoice_number"] == "AC0001"
    assert first_b["invoice_number"] == "INV0001"


def test_failed_create_does_not_consume_number():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com")
    client_id = create_client(client, token)

    resp = client.post("/invoices", json=invoice_payload(client_id, template_id=999), headers=auth(token))
    assert resp.status_code == 404

    data = create_invoice(client, token, client_id)
    assert data["invoice_number"] == "INV0001"


def test_create_invoice_validation():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com")
    client_id = create_client(client, token)

    no_items = client.post("/invoices", json=invoice_payload(client_id, items=[]), headers=auth(token))
    assert no_items.status_code == 422

    bad_item = invoice_payload(client_id, items=[{"description": "x", "quantity": 0, "unit_price": "5"}])
    assert client.post("/invoices", json=bad_item, headers=auth(token)).status_code == 422

    bad_tax = client.post("/invoices", json=invoice_payload(client_id, tax_rate=150), headers=auth(token))
    assert bad_tax.status_code == 422


def test_create_invoice_for_foreign_client_is_not_found():
    client = TestClient(app)
    token_a = register_and_login(client, "a@example.com")
    token_b = register_and_login(client, "b@example.com")
    foreign_client = create_client(client, token_b)

    resp = client.post("/invoices", json=invoice_payload(foreign_client), headers=auth(token_a))
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Client not found"


def test_invoice_of_other_user_is_not_found():
    client = TestClient(app)
    token_a = register_and_login(client, "a@example.com")
    token_b = register_and_login(client, "b@example.com")
    invoice = create_invoice(client, token_a, create_client(client, token_a))

    assert client.get(f"/invoices/{invoice['id']}", headers=auth(token_b)).status_code == 404
    assert client.delete(f"/invoices/{invoice['id']}", headers=auth(token_b)).status_code == 404
    assert set_status(client, token_b, invoice["id"], "SENT").status_code == 404
    assert client.get("/invoices", headers=auth(token_b)).json() == []


def test_update_draft_replaces_items():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com")
    client_id = create_client(client, token)
    invoice = create_invoice(client, token, client_id)

    resp = client.put(
        f"/invoices/{invoice['id']}",
        json=invoice_payload(
            client_id,
            tax_rate=0,
            notes="Revised",
            items=[{"description": "Single line", "quantity": 3, "unit_price": "10.00"}],
        ),
        headers=auth(token),
    )
    assert resp.status_code == 200
    data = resp.json()
    assert data["invoice_number"] == invoice["invoice_number"]
    assert [item["description"] for item in data["items"]] == ["Single line"]
    assert Decimal(data["total"]) == Decimal("30.00")
    assert data["notes"] == "Revised"

    with SessionLocal() as db:
        assert db.query(InvoiceItem).count() == 1


def test_non_draft_invoice_cannot_be_edited_or_deleted():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com")
    client_id = create_client(client, token)
    invoice = create_invoice(client, token, client_id)

    assert set_status(client, token, invoice["id"], "SENT").status_code == 200
    paid = set_status(client, token, invoice["id"], "PAID")
    assert paid.status_code == 200
    assert paid.json()["status"] == "PAID"

    edit = client.put(f"/invoices/{invoice['id']}", json=invoice_payload(client_id), headers=auth(token))
    assert edit.status_code == 400
    assert edit.json()["detail"] == "Cannot edit invoice that is not in draft status"

    delete = client.delete(f"/invoices/{invoice['id']}", headers=auth(token))
    assert delete.status_code == 400
    assert delete.json()["detail"] == "Cannot delete invoice that is not in draft status"


def test_invalid_transition_reports_allowed_statuses():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com")
    invoice = create_invoice(client, token, create_client(client, token))

    resp = set_status(client, token, invoice["id"], "PAID")
    assert resp.status_code == 400
    detail = resp.json()["detail"]
    assert detail["current_status"] == "DRAFT"
    assert detail["requested_status"] == "PAID"
    assert detail["allowed_statuses"] == ["SENT", "CANCELLED"]


def test_unknown_status_value_is_rejected():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com")
    invoice = create_invoice(client, token, create_client(client, token))
    assert set_status(client, token, invoice["id"], "ARCHIVED").status_code == 422


def test_cancelled_invoice_can_return_to_draft_and_be_deleted():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com")
    invoice = create_invoice(client, token, create_client(client, token))

    assert set_status(client, token, invoice["id"], "CANCELLED").status_code == 200
    assert set_status(client, token, invoice["id"], "DRAFT").status_code == 200
    resp = client.delete(f"/invoices/{invoice['id']}", headers=auth(token))
    assert resp.status_code == 200
    assert client.get(f"/invoices/{invoice['id']}", headers=auth(token)).status_code == 404


def test_list_invoices_filters():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com")
    first_client = create_client(client, token, "First Client")
    second_client = create_client(client, token, "Second Client")
    sent = create_invoice(client, token, first_client)
    create_invoice(client, token, second_client)
    set_status(client, token, sent["id"], "SENT")

    by_status = client.get("/invoices", params={"status": "SENT"}, headers=auth(token)).json()
    assert [inv["id"] for inv in by_status] == [sent["id"]]

    by_client = client.get("/invoices", params={"client_id": second_client}, headers=auth(token)).json()
    assert len(by_client) == 1
    assert by_client[0]["client_id"] == second_client


def test_currency_defaults_to_user_setting():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com")
    client.put("/settings/profile", json={"default_currency": "EUR"}, headers=auth(token))
    client_id = create_client(client, token)

    assert create_invoice(client, token, client_id)["currency"] == "EUR"
    assert create_invoice(client, token, client_id, currency="GBP")["currency"] == "GBP"


def test_counter_survives_in_user_row():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com")
    client_id = create_client(client, token)
    create_invoice(client, token, client_id)
    create_invoice(client, token, client_id)

    with SessionLocal() as db:
        user = db.query(User).filter(User.email == "owner@example.com").first()
        assert user.next_invoice_num == 3


def test_tax_rate_precision_matches_stored_column():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com")
    client_id = create_client(client, token)
    items = [{"description": "Retainer", "quantity": 1, "unit_price": "1000.00"}]

    too_precise = client.post(
        "/invoices", json=invoice_payload(client_id, tax_rate="7.125", items=items), headers=auth(token)
    )
    assert too_precise.status_code == 422

    created = create_invoice(client, token, client_id, tax_rate="7.25", items=items)
    fetched = client.get(f"/invoices/{created['id']}", headers=auth(token)).json()
    assert Decimal(fetched["tax_rate"]) == Decimal("7.25")
    assert Decimal(fetched["tax_amount"]) == Decimal("72.50")
    assert Decimal(fetched["total"]) == Decimal("1072.50")

    with SessionLocal() as db:
        invoice = db.query(Invoice).filter(Invoice.id == created["id"]).first()
        pdf_invoice = build_pdf_invoice(invoice)
    assert pdf_invoice.tax_amount == Decimal(fetched["tax_amount"])
    assert pdf_invoice.total == Decimal(fetched["total"])
