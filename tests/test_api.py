"""End-to-end tests for the HTTP surface on a seeded sqlite database."""

import json
from collections.abc import Iterator
from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from storefront.api import create_app
from storefront.checkout import Checkout
from storefront.config import Settings
from storefront.errors import GENERIC_FAILURE_MESSAGE, REQUIRED_FIELDS_MESSAGE

from tests._support import BrokenTransactionStore


@pytest.fixture
def client(tmp_path) -> Iterator[TestClient]:
    settings = Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        log_level="warning",
        log_json=False,
        seed_demo=True,
    )
    with TestClient(create_app(settings)) as c:
        yield c


def _cart(user_id: str = "u-standard", **item) -> dict:
    line = {
        "id": 2,
        "brand": "Sony",
        "name": "WH-1000XM5",
        "price": "₱500.00",
        "quantity": 1,
        "selectedColor": "Black",
        "stock": 10,
    }
    line.update(item)
    return {"userId": user_id, "cartItems": [line], "totalAmount": 500}


# ═══════════════════════════════════════════════════════════════════════════════
# POST /checkout
# ═══════════════════════════════════════════════════════════════════════════════


def test_senior_checkout(client: TestClient) -> None:
    body = _cart(
        "u-senior",
        id=3,
        brand="Samsung",
        name="Galaxy Tab S9",
        price="₱1,120.00",
        selectedColor="Graphite",
    )
    body["totalAmount"] = "1120.00"

    r = client.post("/checkout", json=body)

    assert r.status_code == 201
    data = r.json()
    assert data["success"] is True
    assert data["message"] == "Transaction stored successfully"
    assert isinstance(data["transactionId"], int)
    receipt = data["receiptData"]
    assert receipt["discountType"] == "Senior"
    assert receipt["discountAmount"] == "200.00"
    assert receipt["finalTotal"] == "800.00"
    assert receipt["items"][0]["total"] == "1,120.00"

    product = client.get("/products/3").json()
    assert product["colors"] == [{"color": "Graphite", "stock": 0}]


def test_standard_checkout(client: TestClient) -> None:
    r = client.post("/checkout", json=_cart(quantity=2))

    assert r.status_code == 201
    receipt = r.json()["receiptData"]
    assert receipt["subtotal"] == "1000.00"
    assert receipt["taxAmount"] == "120.00"
    assert receipt["finalTotal"] == "1120.00"


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"userId": "u-standard", "cartItems": [], "totalAmount": 500},
        {"userId": "u-standard", "cartItems": [{"id": 1, "price": 1}], "totalAmount": 0},
        {"cartItems": [{"id": 1, "price": 1}], "totalAmount": 10},
    ],
)
def test_checkout_requires_fields(client: TestClient, body: dict) -> None:
    r = client.post("/checkout", json=body)

    assert r.status_code == 400
    assert r.json() == {"error": REQUIRED_FIELDS_MESSAGE}


def test_checkout_without_address(client: TestClient) -> None:
    r = client.post("/checkout", json=_cart("u-noaddress"))

    assert r.status_code == 400
    assert r.json()["error"].startswith("No address provided.")
    assert client.get("/transactions", params={"userId": "u-noaddress"}).json() == []
    assert client.get("/products/2").json()["colors"][0] == {"color": "Black", "stock": 10}


def test_checkout_unknown_user(client: TestClient) -> None:
    r = client.post("/checkout", json=_cart("nobody"))

    assert r.status_code == 404
    assert r.json() == {"error": "User not found"}


def test_checkout_malformed_items(client: TestClient) -> None:
    body = _cart()
    body["cartItems"] = [{"id": 2, "price": "lots"}]

    r = client.post("/checkout", json=body)

    assert r.status_code == 400
    assert "error" in r.json()


@pytest.mark.parametrize("price", ["NaN", "Infinity", "-Infinity"])
def test_checkout_rejects_non_finite_price(client: TestClient, price: str) -> None:
    raw = (
        '{"userId": "u-standard", "totalAmount": 500, '
        f'"cartItems": [{{"id": 2, "price": {price}, "selectedColor": "Black"}}]}}'
    )

    r = client.post("/checkout", content=raw, headers={"content-type": "application/json"})

    assert r.status_code == 400
    assert r.json()["error"].startswith("Invalid price")
    assert client.get("/transactions").json() == []


def test_checkout_storage_failure_is_a_500(client: TestClient) -> None:
    services = client.app.state.services
    client.app.state.services = replace(
        services,
        checkout=Checkout(services.buyers, services.ledger, BrokenTransactionStore()),
    )

    r = client.post("/checkout", json=_cart())

    assert r.status_code == 500
    assert r.json() == {"error": GENERIC_FAILURE_MESSAGE}
    assert client.get("/products/2").json()["colors"][0] == {"color": "Black", "stock": 10}


def test_checkout_items_wrong_type(client: TestClient) -> None:
    body = _cart()
    body["cartItems"] = "not a list"

    r = client.post("/checkout", json=body)

    assert r.status_code == 400
    assert r.json()["error"].startswith("Invalid request:")


# ═══════════════════════════════════════════════════════════════════════════════
# Admin status board
# ═══════════════════════════════════════════════════════════════════════════════


def test_status_board_round_trip(client: TestClient) -> None:
    tx_id = client.post("/checkout", json=_cart()).json()["transactionId"]

    r = client.post("/transactions", json={"transactionId": tx_id, "status": "In-Transit"})
    assert r.status_code == 200
    assert r.json() == {"success": True}

    rows = client.get("/transactions").json()
    assert len(rows) == 1
    row = rows[0]
    assert row["id"] == tx_id
    assert row["user_id"] == "u-standard"
    assert row["username"] == "Paolo Cruz"
    assert row["status"] == "In-Transit"
    assert row["total_amount"] == 560.0
    assert json.loads(row["receipts"])["finalTotal"] == "560.00"
    assert json.loads(row["orders"]) == [{"id": "2", "color": "Black", "qty": 1}]


def test_status_board_filters_by_user(client: TestClient) -> None:
    client.post("/checkout", json=_cart())
    client.post("/checkout", json=_cart("u-pwd"))

    assert len(client.get("/transactions").json()) == 2
    mine = client.get("/transactions", params={"userId": "u-pwd"}).json()
    assert [row["user_id"] for row in mine] == ["u-pwd"]


def test_status_rejects_unknown_value(client: TestClient) -> None:
    tx_id = client.post("/checkout", json=_cart()).json()["transactionId"]

    r = client.post("/transactions", json={"transactionId": tx_id, "status": "Lost"})

    assert r.status_code == 400
    assert client.get("/transactions").json()[0]["status"] == "Shipped"


def test_status_unknown_transaction(client: TestClient) -> None:
    r = client.post("/transactions", json={"transactionId": 999, "status": "Completed"})

    assert r.status_code == 404
    assert r.json() == {"error": "Transaction not found"}


# ═══════════════════════════════════════════════════════════════════════════════
# Buyers and products
# ═══════════════════════════════════════════════════════════════════════════════


def test_adding_an_address_unblocks_checkout(client: TestClient) -> None:
    before = client.get("/buyers/u-noaddress").json()
    assert before["hasAddress"] is False

    r = client.put(
        "/buyers/u-noaddress",
        json={"name": "Jun Reyes", "address": "9 Bonifacio St", "birthday": "2000-11-05"},
    )
    assert r.status_code == 200
    assert r.json()["hasAddress"] is True

    assert client.post("/checkout", json=_cart("u-noaddress")).status_code == 201


def test_update_unknown_buyer(client: TestClient) -> None:
    r = client.put("/buyers/ghost", json={"name": "Ghost", "address": "Nowhere"})
    assert r.status_code == 404


def test_unknown_buyer_and_product(client: TestClient) -> None:
    assert client.get("/buyers/ghost").status_code == 404
    assert client.get("/products/404").status_code == 404


def test_product_read(client: TestClient) -> None:
    product = client.get("/products/1").json()

    assert product["name"] == "iPhone 15"
    assert product["price"] == "560.00"
    assert product["colors"] == [
        {"color": "Black", "stock": 5},
        {"color": "Blue", "stock": 3},
    ]
