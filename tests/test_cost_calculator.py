from datetime import datetime

import pytest

from venue_booking_api.app.core.config import settings
from venue_booking_api.app.services.cost_calculator import calculate_cost, rental_days


VENUE = {"name": "Grand Ballroom", "price_per_day": 1000.0}
MEAL = {"name": "Royal Buffet", "price_per_person": 10.0}


@pytest.mark.parametrize(
    "start, end, days",
    [
        ("2030-01-01T10:00:00", "2030-01-01T14:00:00", 1),
        ("2030-01-01T10:00:00", "2030-01-02T10:00:00", 1),
        ("2030-01-01T10:00:00", "2030-01-02T11:00:00", 2),
        ("2030-01-01T00:00:00", "2030-01-04T00:00:00", 3),
        ("2030-01-01T10:00:00", "2030-01-01T10:30:00", 1),
    ],
)
def test_rental_days_counts_started_days(start, end, days):
    assert rental_days(datetime.fromisoformat(start), datetime.fromisoformat(end)) == days


def test_rental_days_accepts_aware_datetimes():
    start = datetime.fromisoformat("2030-01-01T10:00:00+06:00")
    end = datetime.fromisoformat("2030-01-02T09:00:00+00:00")
    # 04:00Z to 09:00Z next day is 29 hours
    assert rental_days(start, end) == 2


def test_cost_with_meal():
    cost = calculate_cost(
        VENUE,
        MEAL,
        50,
        datetime(2030, 1, 1, 10),
        datetime(2030, 1, 2, 11),
    )
    assert cost.venue_cost == 2000.0
    assert cost.meal_cost == 500.0
    assert cost.subtotal == 2500.0
    assert cost.tax == 200.0
    assert cost.service_fee == 125.0
    assert cost.total == 2825.0
    assert cost.breakdown.venue.days == 2
    assert cost.breakdown.meal.people == 50
    assert cost.breakdown.fees.tax == 200.0


def test_cost_without_meal_rounds_to_cents():
    venue = {"name": "Loft", "price_per_day": 333.40}
    cost = calculate_cost(venue, None, 10, datetime(2030, 1, 1, 10), datetime(2030, 1, 1, 12))
    assert cost.meal_cost == 0.0
    assert cost.breakdown.meal is None
    assert cost.tax == 26.67
    assert cost.service_fee == 16.67
    assert cost.total == 376.74


def test_rates_come_from_settings(monkeypatch):
    monkeypatch.setattr(settings, "tax_rate", 0.1)
    monkeypatch.setattr(settings, "service_fee_rate", 0.0)
    cost = calculate_cost(VENUE, None, 1, datetime(2030, 1, 1, 10), datetime(2030, 1, 1, 12))
    assert cost.tax == 100.0
    assert cost.service_fee == 0.0
    assert cost.total == 1100.0


def test_calculate_cost_endpoint(client, venue, meal, slot):
    start, end = slot(10, 35)
    resp = client.post(
        "/api/v1/payments/calculate-cost",
        json={"venue_id": venue["id"], "meal_id": meal["id"], "people_count": 50, "start_time": start, "end_time": end},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["breakdown"]["venue"]["days"] == 2
    assert body["total"] == 2825.0


def test_calculate_cost_enforces_meal_minimum_and_capacity(client, venue, meal, slot):
    start, end = slot(10, 14)
    base = {"venue_id": venue["id"], "start_time": start, "end_time": end}

    too_few = client.post("/api/v1/payments/calculate-cost", json={**base, "meal_id": meal["id"], "people_count": 5})
    assert too_few.status_code == 400
    assert too_few.json()["error"]["message"] == (
        "This meal requires a minimum of 20 guests, but you requested 5"
    )

    too_many = client.post("/api/v1/payments/calculate-cost", json={**base, "people_count": 201})
    assert too_many.status_code == 400
    assert too_many.json()["error"]["message"] == "Venue capacity is 200 people, but you requested 201 people"

    missing = client.post("/api/v1/payments/calculate-cost", json={**base, "venue_id": 999, "people_count": 1})
    assert missing.status_code == 404
