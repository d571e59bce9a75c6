from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient

from quote_tool.api.main import app
from quote_tool.api.state import repository


@pytest.fixture(scope="module")
def client():
    return TestClient(app)


def delivery(days_out: int) -> str:
    return (date.today() + timedelta(days=days_out)).isoformat()


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "online"


def test_list_products_filtered(client):
    response = client.get("/products", params={"type": "industrial"})
    assert response.status_code == 200
    assert {p["type"] for p in response.json()} == {"industrial"}


def test_list_products_unknown_type(client):
    response = client.get("/products", params={"type": "spaceship"})
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_get_product_not_found(client):
    response = client.get("/products/NOPE")
    assert response.status_code == 404
    assert response.json() == {
        "code": "PRODUCT_NOT_FOUND",
        "message": "Product 'NOPE' not found",
        "details": {"product_id": "NOPE"},
    }


def test_quote_industrial_bulk(client):
    response = client.post("/quote", json={
        "product_id": "IND-100",
        "quantity": 50,
        "delivery_date": delivery(30),
    })
    assert response.status_code == 200
    body = response.json()
    assert body["final_price"] == 4250.0
    assert body["required_fields"] == ["certification"]
    assert body["missing_required_fields"] == ["certification"]
    assert [f["name"] for f in body["form"]][-1] == "certification"


def test_quote_residential_rush(client):
    response = client.post("/quote", json={
        "product_id": "RES-200",
        "quantity": 1,
        "delivery_date": delivery(3),
    })
    assert response.status_code == 200
    body = response.json()
    assert body["adjustments"] == [{"label": "urgency-fee", "amount": 40.0, "kind": "surcharge"}]
    assert body["final_price"] == 240.0


def test_quote_rejects_zero_quantity(client):
    response = client.post("/quote", json={
        "product_id": "RES-200",
        "quantity": 0,
        "delivery_date": delivery(10),
    })
    assert response.status_code == 422
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_form_endpoint(client):
    response = client.get("/products/RES-200/form")
    assert response.status_code == 200
    names = [f["name"] for f in response.json()["fields"]]
    assert "color_code" in names and "voltage" not in names


def test_create_product(client):
    response = client.post("/products", json={
        "type": "corporate", "id": "CORP-API", "basePrice": 10, "licenseSeats": 3, "supportTier": "basic",
    })
    try:
        assert response.status_code == 201
        assert response.json()["license_seats"] == 3

        duplicate = client.post("/products", json={
            "type": "corporate", "id": "CORP-API", "basePrice": 10, "licenseSeats": 3, "supportTier": "basic",
        })
        assert duplicate.status_code == 422
    finally:
        if "CORP-API" in repository:
            repository.remove("CORP-API")


def test_create_product_invalid(client):
    response = client.post("/products", json={"type": "industrial", "id": "IND-BAD", "basePrice": 10})
    assert response.status_code == 422
    assert response.json()["details"]["field"] == "voltage"


def test_create_product_infinite_price_is_not_stored(client):
    response = client.post("/products", json={
        "type": "industrial", "id": "INF-1", "base_price": "inf", "voltage": 110,
    })
    assert response.status_code == 422
    assert response.json()["details"]["field"] == "base_price"
    assert "INF-1" not in repository


def test_malformed_quote_body_uses_error_shape(client):
    response = client.post("/quote", json={
        "product_id": "RES-200",
        "quantity": "abc",
        "delivery_date": delivery(10),
    })
    assert response.status_code == 422
    body = response.json()
    assert body["code"] == "VALIDATION_ERROR"
    assert set(body) == {"code", "message", "details"}
    assert body["details"]["errors"]
