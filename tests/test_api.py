from decimal import Decimal
import pytest
from fastapi.testclient import TestClient
from splitledger.database import get_db
from splitledger.main import app
from splitledger.services import rates

@pytest.fixture
def client(db, monkeypatch):
    def override_get_db():
        yield db
    monkeypatch.setattr(rates, "fetch_live_rates", lambda timeout=None: {"THB": Decimal(1), "USD": Decimal("36.25")})
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()

def _setup(client):
    alice = client.post("/users", json={"name": "Alice", "email": "alice@example.com"}).json()
    bob = client.post("/users", json={"name": "Bob", "email": "bob@example.com"}).json()
    group = client.post("/groups", json={"name": "Trip"}).json()
    for u in (alice, bob):
        assert client.post(f"/groups/{group['id']}/members", json={"user_id": u["id"]}).status_code == 200
    expense = client.post("/expenses", json={"group_id": group["id"], "payer_id": alice["id"], "title": "Dinner"})
    assert expense.status_code == 201
    return alice, bob, group, expense.json()

def test_health(client):
    assert client.get("/").json() == {"status": "ok"}

def test_full_flow(client):
    alice, bob, group, expense = _setup(client)
    eid = expense["id"]
    item = client.post(f"/expenses/{eid}/items", json={"name": "Pizza", "amount": "100.00", "currency": "THB"}).json()
    r = client.post(f"/expenses/{eid}/items/{item['id']}/shares", json={"participant_id": alice["id"], "percent": "10"})
    assert r.status_code == 201
    assert r.json()["computed_value"] == "10.00"
    r = client.post(f"/expenses/{eid}/items/{item['id']}/shares", json={"participant_id": bob["id"], "value": "5.00"})
    assert r.json()["computed_value"] == "5.00"

    p = client.post(f"/expenses/{eid}/payments", json={"from_user_id": bob["id"], "amount": "2.00"}).json()
    assert p["status"] == "PENDING"
    r = client.put(f"/expenses/{eid}/payments/{p['id']}/status", json={"status": "VERIFIED"})
    assert r.json()["status"] == "VERIFIED"

    line = client.get(f"/expenses/{eid}/settlements/{bob['id']}").json()
    assert line == {"expense_id": eid, "user_id": bob["id"], "owed_amount": "5.00", "paid_amount": "2.00", "remaining": "3.00", "settled": False}
    assert [s["user_id"] for s in client.get(f"/expenses/{eid}/settlements").json()] == [alice["id"], bob["id"]]

    balances = client.get(f"/users/{alice['id']}/balances").json()
    assert len(balances) == 1
    assert balances[0]["direction"] == "OWES_YOU"
    assert balances[0]["counterparty_user_id"] == bob["id"]
    assert balances[0]["remaining"] == "3.00"
    assert client.get(f"/users/{alice['id']}/balances/summary").json() == {"you_owe_total": "0.00", "you_are_owed_total": "3.00"}
    assert client.get(f"/users/{bob['id']}/balances/summary").json() == {"you_owe_total": "3.00", "you_are_owed_total": "0.00"}

def test_snapshot_survives_expense_update(client, monkeypatch):
    alice, bob, group, expense = _setup(client)
    eid = expense["id"]
    monkeypatch.setattr(rates, "fetch_live_rates", lambda timeout=None: {"THB": Decimal(1), "USD": Decimal(99)})
    assert client.patch(f"/expenses/{eid}", json={"title": "Late dinner"}).json()["title"] == "Late dinner"
    client.post(f"/expenses/{eid}/items", json={"name": "Wine", "amount": "10", "currency": "USD"})
    assert client.get(f"/expenses/{eid}/summary").json() == {"items_total": "362.50", "verified_total": "0.00"}

def test_error_status_codes(client):
    alice, bob, group, expense = _setup(client)
    eid = expense["id"]
    item = client.post(f"/expenses/{eid}/items", json={"name": "Pizza", "amount": "100.00"}).json()
    shares_url = f"/expenses/{eid}/items/{item['id']}/shares"

    r = client.post(shares_url, json={"participant_id": bob["id"]})
    assert r.status_code == 400
    assert r.json()["detail"] == "Either value or percent is required"
    assert client.post(shares_url, json={"participant_id": bob["id"], "percent": "101"}).status_code == 400
    assert client.post(f"/expenses/{eid}/items/9999/shares", json={"participant_id": bob["id"], "percent": "1"}).status_code == 404
    assert client.post(f"/expenses/{eid}/payments", json={"from_user_id": bob["id"], "amount": "0"}).status_code == 400
    assert client.get(f"/expenses/9999/settlements/{bob['id']}").status_code == 404
    assert client.get("/users/9999/balances").status_code == 404
    assert client.post("/users", json={"name": "Again", "email": "alice@example.com"}).status_code == 409

    p = client.post(f"/expenses/{eid}/payments", json={"from_user_id": bob["id"], "amount": "1"}).json()
    receipt_url = f"/expenses/{eid}/payments/{p['id']}/receipt"
    assert client.post(receipt_url, json={"file_url": "https://files.example.com/a.png"}).status_code == 201
    assert client.post(receipt_url, json={"file_url": "https://files.example.com/b.png"}).status_code == 409

def test_legacy_share_routes(client):
    alice, bob, group, expense = _setup(client)
    eid = expense["id"]
    item = client.post(f"/expenses/{eid}/items", json={"name": "Pizza", "amount": "200.00"}).json()
    share = client.post(f"/items/{item['id']}/shares", json={"participant_id": bob["id"], "value": "4"}).json()
    updated = client.patch(f"/shares/{share['id']}", json={"percent": "12.5"}).json()
    assert updated["computed_value"] == "25.00"
    assert updated["value"] == "4.00"

def test_participating_expenses_lists_only_shared_ones(client):
    alice, bob, group, expense = _setup(client)
    eid = expense["id"]
    client.post("/expenses", json={"group_id": group["id"], "payer_id": bob["id"], "title": "Taxi"})
    item = client.post(f"/expenses/{eid}/items", json={"name": "Pizza", "amount": "40"}).json()
    client.post(f"/expenses/{eid}/items/{item['id']}/shares", json={"participant_id": bob["id"], "percent": "50"})
    assert [e["id"] for e in client.get(f"/users/{bob['id']}/expenses").json()] == [eid]
    assert client.get(f"/users/{alice['id']}/expenses").json() == []
    assert client.get("/users/9999/expenses").status_code == 404

def test_item_update_is_reflected_in_settlement(client):
    alice, bob, group, expense = _setup(client)
    eid = expense["id"]
    item = client.post(f"/expenses/{eid}/items", json={"name": "Pizza", "amount": "100.00"}).json()
    client.post(f"/expenses/{eid}/items/{item['id']}/shares", json={"participant_id": bob["id"], "percent": "10"})
    assert client.patch(f"/expenses/{eid}/items/{item['id']}", json={"amount": "200.00"}).status_code == 200
    assert client.get(f"/expenses/{eid}/settlements/{bob['id']}").json()["owed_amount"] == "20.00"
