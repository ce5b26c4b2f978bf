"""Shared fixtures for the API tests.

Every test runs against a fresh SQLite file in ``tmp_path``.  The
simulated payment gateway answers instantly and always succeeds unless
a test overrides the rates on ``settings``.
"""

from datetime import timedelta
from typing import Any, Callable, Dict, Iterator, Tuple

import pytest
from fastapi.testclient import TestClient

from venue_booking_api.app.core.config import settings
from venue_booking_api.app.core.db import utcnow
from venue_booking_api.app.main import app


PASSWORD = "Str0ng!Pass"


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch) -> None:
    monkeypatch.setattr(settings, "database_url", str(tmp_path / "test.db"))
    monkeypatch.setattr(settings, "payment_simulation_delay", 0.0)
    monkeypatch.setattr(settings, "refund_simulation_delay", 0.0)
    monkeypatch.setattr(settings, "payment_success_rate", 1.0)
    monkeypatch.setattr(settings, "refund_success_rate", 1.0)
    monkeypatch.setattr(settings, "webhook_secret", "")
    monkeypatch.setattr(settings, "admin_email", "")
    monkeypatch.setattr(settings, "admin_password", "")


@pytest.fixture
def client() -> Iterator[TestClient]:
    # Entering the client runs the startup hook, which creates the schema.
    with TestClient(app) as test_client:
        yield test_client


def bearer(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client) -> Callable[..., Tuple[Dict[str, Any], Dict[str, str]]]:
    """Register an account and return ``(account, auth_headers)``.

    ``organizer=True`` registers through the admin routes.
    """

    def _register(email: str = "jane@example.com", name: str = "Jane Doe", organizer: bool = False):
        path = "/api/v1/admin/register" if organizer else "/api/v1/auth/register"
        resp = client.post(path, json={"name": name, "email": email, "password": PASSWORD})
        assert resp.status_code == 201, resp.json()
        body = resp.json()
        account = body["organizer"] if organizer else body["user"]
        return account, bearer(body["token"])

    return _register


@pytest.fixture
def user_headers(register) -> Dict[str, str]:
    return register()[1]


@pytest.fixture
def organizer_headers(register) -> Dict[str, str]:
    return register(email="boss@example.com", name="Boss", organizer=True)[1]


@pytest.fixture
def make_venue(client, organizer_headers) -> Callable[..., Dict[str, Any]]:
    def _make_venue(**overrides: Any) -> Dict[str, Any]:
        payload = {
            "name": "Grand Ballroom",
            "address": "12 Gulshan Avenue",
            "city": "Dhaka",
            "capacity": 200,
            "price_per_day": 1000.0,
            "facilities": ["parking", "stage"],
        }
        payload.update(overrides)
        resp = client.post("/api/v1/admin/venues", json=payload, headers=organizer_headers)
        assert resp.status_code == 201, resp.json()
        return resp.json()

    return _make_venue


@pytest.fixture
def make_meal(client, organizer_headers) -> Callable[..., Dict[str, Any]]:
    def _make_meal(**overrides: Any) -> Dict[str, Any]:
        payload = {
            "name": "Royal Buffet",
            "type": "buffet",
            "price_per_person": 10.0,
            "minimum_guests": 20,
        }
        payload.update(overrides)
        resp = client.post("/api/v1/admin/meals", json=payload, headers=organizer_headers)
        assert resp.status_code == 201, resp.json()
        return resp.json()

    return _make_meal


@pytest.fixture
def venue(make_venue) -> Dict[str, Any]:
    return make_venue()


@pytest.fixture
def meal(make_meal) -> Dict[str, Any]:
    return make_meal()


@pytest.fixture
def slot() -> Callable[[int, int], Tuple[str, str]]:
    """Build a ``(start, end)`` pair of ISO strings on a day well in the future.

    ``slot(10, 14)`` covers 10:00 to 14:00; an end hour past 24 spills
    into the following days.
    """
    day = (utcnow() + timedelta(days=30)).replace(hour=0, minute=0, second=0, microsecond=0)

    def _slot(start_hour: int, end_hour: int) -> Tuple[str, str]:
        start = day + timedelta(hours=start_hour)
        end = day + timedelta(hours=end_hour)
        return start.isoformat(), end.isoformat()

    return _slot


@pytest.fixture
def book(client, user_headers, venue, slot) -> Callable[..., Any]:
    """Create an event for the default customer and return the response."""

    def _book(start_hour: int = 10, end_hour: int = 14, headers: Dict[str, str] = None, **overrides: Any):
        start, end = slot(start_hour, end_hour)
        payload = {
            "venue_id": venue["id"],
            "event_type": "wedding",
            "people_count": 50,
            "start_time": start,
            "end_time": end,
        }
        payload.update(overrides)
        return client.post("/api/v1/events", json=payload, headers=headers or user_headers)

    return _book
