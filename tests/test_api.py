import pytest
from fastapi.testclient import TestClient

from marketplace_pricing.api.main import app


@pytest.fixture(scope="module")
def client():
    return TestClient(app)


def test_root(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "online"


def test_line_items_for_catalog_listing(client):
    response = client.post("/api/transaction-line-items", json={
        "listingId": "camera-daily",
        "orderData": {"bookingStart": "2024-01-01", "bookingEnd": "2024-01-04"},
    })
    assert response.status_code == 200
    body = response.json()
    assert [item["code"] for item in body["data"]] == ["line-item/day", "line-item/discount-10%"]
    assert body["data"][0]["quantity"] == 3
    assert body["data"][0]["lineTotal"] == {"amount": 30000, "currency": "USD"}
    assert body["data"][1]["lineTotal"] == {"amount": -3000, "currency": "USD"}
    assert body["payinTotal"] == {"amount": 27000, "currency": "USD"}
    assert body["payoutTotal"] == {"amount": 27000, "currency": "USD"}


def test_line_items_for_inline_listing_with_commission(client):
    listing = {
        "attributes": {
            "price": {"amount": 12000, "currency": "USD"},
            "publicData": {
                "unitType": "item",
                "shippingPriceInSubunitsOneItem": 500,
                "shippingPriceInSubunitsAdditionalItems": 200,
            },
        },
    }
    response = client.post("/api/transaction-line-items", json={
        "listing": listing,
        "orderData": {"stockReservationQuantity": 3, "deliveryMethod": "shipping"},
        "providerCommission": {"percentage": 10},
    })
    assert response.status_code == 200
    body = response.json()
    commission = body["data"][2]
    assert commission["code"] == "line-item/provider-commission"
    assert commission["percentage"] == -10
    assert commission["unitPrice"] == {"amount": 36000, "currency": "USD"}
    assert commission["includeFor"] == ["provider"]
    assert body["payinTotal"]["amount"] == 36900
    assert body["payoutTotal"]["amount"] == 33300


def test_missing_quantity_is_bad_request(client):
    response = client.post("/api/transaction-line-items", json={"listingId": "tent-sale", "orderData": {}})
    assert response.status_code == 400
    assert "stockReservationQuantity" in response.json()["detail"]["message"]


def test_invalid_listing_is_bad_request(client):
    response = client.post("/api/transaction-line-items", json={
        "listing": {"attributes": {"publicData": {"unitType": "day"}}},
        "orderData": {"bookingStart": "2024-01-01", "bookingEnd": "2024-01-04"},
    })
    assert response.status_code == 400

def test_mixed_timezone_booking_is_bad_request(client):
    response = client.post("/api/transaction-line-items", json={
        "listingId": "studio-hourly",
        "orderData": {"bookingStart": "2024-01-01T09:00:00Z", "bookingEnd": "2024-01-01T12:00:00"},
    })
    assert response.status_code == 400
    assert "timezone" in response.json()["detail"]


@pytest.mark.parametrize("price", [5, {"amount": 999.9, "currency": "USD"}])
def test_malformed_price_is_bad_request(client, price):
    response = client.post("/api/transaction-line-items", json={
        "listing": {"attributes": {"price": price, "publicData": {"unitType": "day"}}},
        "orderData": {"bookingStart": "2024-01-01", "bookingEnd": "2024-01-04"},
    })
    assert response.status_code == 400


def test_fractional_shipping_fee_is_bad_request(client):
    response = client.post("/api/transaction-line-items", json={
        "listing": {
            "attributes": {
                "price": {"amount": 12000, "currency": "USD"},
                "publicData": {"unitType": "item", "shippingPriceInSubunitsOneItem": 500.7},
            },
        },
        "orderData": {"stockReservationQuantity": 1, "deliveryMethod": "shipping"},
    })
    assert response.status_code == 400
    assert "shippingPriceInSubunitsOneItem" in response.json()["detail"]



def test_unknown_listing_id(client):
    response = client.post("/api/transaction-line-items", json={"listingId": "nope", "orderData": {}})
    assert response.status_code == 404


def test_listing_or_id_required(client):
    response = client.post("/api/transaction-line-items", json={"orderData": {}})
    assert response.status_code == 400


def test_listings_endpoints(client):
    listings = client.get("/api/listings").json()["data"]
    assert {listing["id"] for listing in listings} >= {"camera-daily", "tent-sale"}

    response = client.get("/api/listings/studio-hourly")
    assert response.json()["data"]["attributes"]["publicData"]["unitType"] == "hour"
    assert client.get("/api/listings/nope").status_code == 404


def test_status(client):
    status = client.get("/system/status").json()
    assert status["engine_active"] is True
    assert status["catalog_loaded"] is True
    assert status["listings_count"] == 5
    assert status["max_line_items"] == 50
