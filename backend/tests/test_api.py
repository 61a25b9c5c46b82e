"""API tests for the RideCompare endpoints."""

import logging
from unittest.mock import Mock

from app.api.endpoints import get_comparator
from app.config import settings
from app.main import app, configure_logging
from app.services.estimators import build_estimators
from app.services.geo import round_half_up
from app.services.ride_comparator import RideComparator
from app.services.uber_client import UberPriceClient

from fastapi.testclient import TestClient

PICKUP = {"address": "City Hall, New York", "latitude": 40.7128, "longitude": -74.0060}
DROPOFF = {"address": "Times Square, New York", "latitude": 40.7580, "longitude": -73.9855}


class TestRoot:
    """Test informational endpoints."""

    def test_root_endpoint(self, client):
        response = client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert "message" in data
        assert data["version"] == settings.API_VERSION

    def test_health_check(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["datastore_status"] == "healthy"
        assert data["countries_count"] == 10
        assert data["uber_api"] == "mock"


class TestLogging:
    """Test logging setup."""

    def test_lowercase_level(self):
        root = logging.getLogger()
        previous = root.level
        try:
            configure_logging("debug")
            assert root.level == logging.DEBUG
            configure_logging(" Warning ")
            assert root.level == logging.WARNING
        finally:
            root.setLevel(previous)


class TestCountriesAPI:
    """Test country listing endpoints."""

    def test_list_countries(self, client):
        response = client.get("/api/countries")
        assert response.status_code == 200
        data = response.json()
        assert data["default_country"] == "US"
        assert data["total_countries"] == 10

        codes = [c["code"] for c in data["countries"]]
        assert "IN" in codes
        assert "RU" in codes
        assert "currencySymbol" in data["countries"][0]
        assert "priceMultiplier" in data["countries"][0]

    def test_get_country(self, client):
        response = client.get("/api/countries/in")
        assert response.status_code == 200
        data = response.json()
        assert data["code"] == "IN"
        assert data["currencySymbol"] == "₹"
        assert data["services"] == ["uber", "bolt", "yango"]

    def test_unknown_country_resolves_to_us(self, client):
        response = client.get("/api/countries/XX")
        assert response.status_code == 200
        assert response.json()["code"] == "US"


class TestCompareRidesAPI:
    """Test the ride comparison endpoint."""

    def test_default_country(self, seeded_client):
        response = seeded_client.post("/api/rides/compare", json={"pickup": PICKUP, "dropoff": DROPOFF})
        assert response.status_code == 200

        data = response.json()
        assert 5250 < data["tripDistance"] < 5380
        assert data["tripDuration"] == round_half_up(data["tripDistance"] * 0.25)

        providers = {e["provider"] for e in data["estimates"]}
        assert providers == {"uber", "bolt"}
        assert all(e["currency"] == "USD" for e in data["estimates"])
        assert all(e["priceRange"].startswith("$") for e in data["estimates"])

    def test_response_shape(self, seeded_client):
        response = seeded_client.post("/api/rides/compare", json={"pickup": PICKUP, "dropoff": DROPOFF})
        estimate = response.json()["estimates"][0]

        assert estimate["id"] == "uber-x"
        assert estimate["serviceName"] == "UberX"
        assert estimate["category"] == "economy"
        assert estimate["arrivalTime"] == "4 min away"
        assert estimate["capacity"] == 4
        assert estimate["distance"] == response.json()["tripDistance"]
        assert estimate["estimatedDuration"] == response.json()["tripDuration"]
        # No surge is left out of the payload
        assert "surge" not in estimate

    def test_india(self, seeded_client):
        us = seeded_client.post(
            "/api/rides/compare", json={"pickup": PICKUP, "dropoff": DROPOFF}
        ).json()
        india = seeded_client.post(
            "/api/rides/compare", json={"pickup": PICKUP, "dropoff": DROPOFF, "country": "IN"}
        ).json()

        assert {e["provider"] for e in india["estimates"]} == {"uber", "bolt", "yango"}
        assert all(e["currency"] == "INR" for e in india["estimates"])
        assert all(e["priceRange"].startswith("₹") for e in india["estimates"])

        india_prices = {e["id"]: e["price"] for e in india["estimates"]}
        for estimate in us["estimates"]:
            assert abs(india_prices[estimate["id"]] - estimate["price"] * 0.25) <= 1

    def test_russia_excludes_uber(self, client):
        response = client.post(
            "/api/rides/compare", json={"pickup": PICKUP, "dropoff": DROPOFF, "country": "RU"}
        )
        assert response.status_code == 200
        providers = {e["provider"] for e in response.json()["estimates"]}
        assert providers == {"yango", "bolt"}

    def test_long_unknown_country_falls_back_to_us(self, seeded_client):
        response = seeded_client.post(
            "/api/rides/compare",
            json={"pickup": PICKUP, "dropoff": DROPOFF, "country": "UNITED-STATES"},
        )
        assert response.status_code == 200

        estimates = response.json()["estimates"]
        assert {e["provider"] for e in estimates} == {"uber", "bolt"}
        assert all(e["currency"] == "USD" for e in estimates)

    def test_huge_integer_latitude(self, client):
        pickup = dict(PICKUP, latitude=10 ** 400)
        response = client.post("/api/rides/compare", json={"pickup": pickup, "dropoff": DROPOFF})
        assert response.status_code == 422

    def test_empty_address(self, client):
        pickup = dict(PICKUP, address="")
        response = client.post("/api/rides/compare", json={"pickup": pickup, "dropoff": DROPOFF})
        assert response.status_code == 422

    def test_non_numeric_latitude(self, client):
        pickup = dict(PICKUP, latitude="forty")
        response = client.post("/api/rides/compare", json={"pickup": pickup, "dropoff": DROPOFF})
        assert response.status_code == 422

        pickup = dict(PICKUP, latitude="40.7128")
        response = client.post("/api/rides/compare", json={"pickup": pickup, "dropoff": DROPOFF})
        assert response.status_code == 422

    def test_missing_dropoff(self, client):
        response = client.post("/api/rides/compare", json={"pickup": PICKUP})
        assert response.status_code == 422

    def test_malformed_request_computes_nothing(self):
        comparator = Mock()
        app.dependency_overrides[get_comparator] = lambda: comparator
        try:
            response = TestClient(app).post(
                "/api/rides/compare", json={"pickup": dict(PICKUP, address=""), "dropoff": DROPOFF}
            )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 422
        comparator.compare_rides.assert_not_called()

    def test_unexpected_error_is_generic(self):
        comparator = Mock()
        comparator.compare_rides.side_effect = RuntimeError("database password is hunter2")
        app.dependency_overrides[get_comparator] = lambda: comparator
        try:
            response = TestClient(app).post(
                "/api/rides/compare", json={"pickup": PICKUP, "dropoff": DROPOFF}
            )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to get ride estimates"

    def test_uber_api_failure_falls_back(self, no_surge_rng):
        session = Mock()
        session.get.return_value = Mock(status_code=500)
        client = UberPriceClient("token", session=session)
        comparator = RideComparator(build_estimators(rng=no_surge_rng, uber_client=client))

        app.dependency_overrides[get_comparator] = lambda: comparator
        try:
            response = TestClient(app).post(
                "/api/rides/compare", json={"pickup": PICKUP, "dropoff": DROPOFF}
            )
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 200
        ids = [e["id"] for e in response.json()["estimates"]]
        assert ids == ["uber-x", "uber-comfort", "bolt-standard", "bolt-comfort"]
        session.get.assert_called_once()


class TestBookingAPI:
    """Test the simulated booking endpoint."""

    def test_book_ride(self, client):
        payload = {"rideId": "bolt-comfort", "pickup": PICKUP, "dropoff": DROPOFF}
        response = client.post("/api/rides/book", json=payload)
        assert response.status_code == 200

        data = response.json()
        assert data["provider"] == "bolt"
        assert data["rideId"] == "bolt-comfort"
        assert data["status"] == "confirmed"
        assert data["paymentMethod"] == "card"
        assert data["bookingId"].startswith("bolt-booking-")
        assert 2 <= data["eta"] <= 8
        assert data["arrivalTime"] == f"{data['eta']} min away"

    def test_book_unknown_provider(self, client):
        payload = {"rideId": "lyft-standard", "pickup": PICKUP, "dropoff": DROPOFF}
        response = client.post("/api/rides/book", json=payload)
        assert response.status_code == 400
        assert "Unknown ride id" in response.json()["detail"]

    def test_book_invalid_location(self, client):
        payload = {"rideId": "uber-x", "pickup": dict(PICKUP, longitude=None), "dropoff": DROPOFF}
        response = client.post("/api/rides/book", json=payload)
        assert response.status_code == 422
