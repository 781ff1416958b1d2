import pytest
from fastapi.testclient import TestClient

from invoicehub.app.db.base import Base
from invoicehub.app.db.session import engine
from invoicehub.app.main import app


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


def test_create_and_list_clients_with_invoice_count():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com")
    resp = client.post(
        "/clients",
        json={"name": "Acme Corp", "email": "", "company": "Acme", "phone": "555-0100"},
        headers=auth(token),
    )
    assert resp.status_code == 201
    created = resp.json()
    assert created["email"] is None
    assert created["invoice_count"] == 0

    client.post(
        "/invoices",
        json={
            "client_id": created["id"],
            "issue_date": "2024-06-01",
            "items": [{"description": "Work", "quantity": 1, "unit_price": "10.00"}],
        },
        headers=auth(token),
    )

    listed = client.get("/clients", headers=auth(token)).json()
    assert len(listed) == 1
    assert listed[0]["invoice_count"] == 1


def test_client_validation():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com")
    assert client.post("/clients", json={"name": "A"}, headers=auth(token)).status_code == 422
    assert client.post("/clients", json={"name": "Valid", "email": "not-an-email"}, headers=auth(token)).status_code == 422


def test_update_client():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com")
    client_id = client.post("/clients", json={"name": "Old Name"}, headers=auth(token)).json()["id"]

    resp = client.put(f"/clients/{client_id}", json={"name": "New Name", "notes": "VIP"}, headers=auth(token))
    assert resp.status_code == 200
    assert resp.json()["name"] == "New Name"
    assert resp.json()["notes"] == "VIP"


def test_client_with_invoices_cannot_be_deleted():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com")
    client_id = client.post("/clients", json={"name": "Busy Client"}, headers=auth(token)).json()["id"]
    client.post(
        "/invoices",
        json={
            "client_id": client_id,
            "issue_date": "2024-06-01",
            "items": [{"description": "Work", "quantity": 1, "unit_price": "10.00"}],
        },
        headers=auth(token),
    )

    resp = client.delete(f"/clients/{client_id}", headers=auth(token))
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Cannot delete client with existing invoices"
    assert client.get(f"/clients/{client_id}", headers=auth(token)).status_code == 200


def test_delete_client_without_invoices():
    client = TestClient(app)
    token = register_and_login(client, "owner@example.com")
    client_id = client.post("/clients", json={"name": "Idle Client"}, headers=auth(token)).json()["id"]

    assert client.delete(f"/clients/{client_id}", headers=auth(token)).status_code == 200
    assert client.get(f"/clients/{client_id}", headers=auth(token)).status_code == 404


def test_clients_are_owner_isolated():
    client = TestClient(app)
    token_a = register_and_login(client, "a@example.com")
    token_b = register_and_login(client, "b@example.com")
    client_id = client.post("/clients", json={"name": "Private"}, headers=auth(token_a)).json()["id"]

    assert client.get("/clients", headers=auth(token_b)).json() == []
    assert client.get(f"/clients/{client_id}", headers=auth(token_b)).status_code == 404
    assert client.put(f"/clients/{client_id}", json={"name": "Hijack"}, headers=auth(token_b)).status_code == 404
    assert client.delete(f"/clients/{client_id}", headers=auth(token_b)).status_code == 404


def test_clients_require_auth():
    client = TestClient(app)
    assert client.get("/clients").status_code == 401
