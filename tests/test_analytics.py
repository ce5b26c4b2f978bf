from datetime import timedelta

import pytest

from venue_booking_api.app.core.db import utcnow
from venue_booking_api.app.services.analytics_service import period_key


@pytest.mark.parametrize(
    "group_by, expected",
    [
        ("day", "2030-05-15"),
        ("week", "2030-05-12"),
        ("month", "2030-05"),
        ("year", "2030"),
    ],
)
def test_period_key(group_by, expected):
    # 2030-05-15 is a Wednesday; its week starts on Sunday 2030-05-12.
    assert period_key("2030-05-15T13:45:00", group_by) == expected


def test_week_key_of_a_sunday_is_itself():
    assert period_key("2030-05-12T00:00:00", "week") == "2030-05-12"


@pytest.fixture
def bookings(client, book, make_venue, meal, slot, register, organizer_headers):
    """Three bookings: two weddings at the ballroom (one catered) and a party elsewhere."""
    garden = make_venue(name="Garden", price_per_day=500)
    first = book(10, 12, meal_id=meal["id"]).json()  # 1000 + 500 -> 1695
    book(14, 16).json()  # 1000 -> 1130
    _, other_headers = register(email="other@example.com", name="Other")
    party = book(10, 12, venue_id=garden["id"], event_type="party", headers=other_headers).json()  # 500 -> 565
    client.patch(f"/api/v1/admin/events/{party['id']}/status", json={"status": "cancelled"}, headers=organizer_headers)
    return {"first": first, "garden": garden}


def test_dashboard(client, bookings, organizer_headers):
    resp = client.get("/api/v1/admin/analytics/dashboard", headers=organizer_headers)
    assert resp.status_code == 200
    stats = resp.json()
    assert stats["total_events"] == 3
    assert stats["total_revenue"] == 3390.0
    assert stats["average_event_value"] == 1130.0
    assert stats["total_users"] == 2
    assert stats["total_venues"] == 2
    assert stats["total_meals"] == 1
    assert stats["recent_events"] == 3
    assert stats["pending_events"] == 2
    assert stats["cancelled_events"] == 1
    assert stats["confirmed_events"] == 0


def test_date_window(client, bookings, organizer_headers):
    past = (utcnow() - timedelta(days=10)).isoformat()
    earlier = (utcnow() - timedelta(days=20)).isoformat()
    empty = client.get(
        "/api/v1/admin/analytics/dashboard",
        params={"start_date": earlier, "end_date": past},
        headers=organizer_headers,
    ).json()
    assert empty["total_events"] == 0
    assert empty["average_event_value"] == 0.0

    inverted = client.get(
        "/api/v1/admin/analytics/dashboard",
        params={"start_date": past, "end_date": earlier},
        headers=organizer_headers,
    )
    assert inverted.status_code == 400
    assert inverted.json()["error"]["message"] == "Start date must be before end date"


def test_revenue_grouping(client, bookings, organizer_headers):
    today = utcnow().date()
    by_day = client.get("/api/v1/admin/analytics/revenue", params={"group_by": "day"}, headers=organizer_headers).json()
    assert by_day == [
        {"period": today.isoformat(), "total_revenue": 3390.0, "event_count": 3, "average_event_value": 1130.0}
    ]

    by_year = client.get("/api/v1/admin/analytics/revenue", params={"group_by": "year"}, headers=organizer_headers).json()
    assert by_year[0]["period"] == str(today.year)

    bad = client.get("/api/v1/admin/analytics/revenue", params={"group_by": "hour"}, headers=organizer_headers)
    assert bad.status_code == 400


def test_top_venues_and_meals(client, bookings, organizer_headers):
    venues = client.get("/api/v1/admin/analytics/venues/top", headers=organizer_headers).json()
    assert [v["name"] for v in venues] == ["Grand Ballroom", "Garden"]
    assert venues[0]["event_count"] == 2
    assert venues[0]["total_revenue"] == 2825.0
    assert venues[0]["average_event_value"] == 1412.5

    limited = client.get("/api/v1/admin/analytics/venues/top", params={"limit": 1}, headers=organizer_headers).json()
    assert len(limited) == 1

    meals = client.get("/api/v1/admin/analytics/meals/top", headers=organizer_headers).json()
    assert meals == [
        {
            "id": bookings["first"]["meal_id"],
            "name": "Royal Buffet",
            "order_count": 1,
            "total_revenue": 500.0,
            "average_order_value": 500.0,
        }
    ]


def test_event_types(client, bookings, organizer_headers):
    types = client.get("/api/v1/admin/analytics/event-types", headers=organizer_headers).json()
    assert [t["event_type"] for t in types] == ["wedding", "party"]
    assert types[0]["count"] == 2
    assert types[0]["percentage"] == 66.67
    assert types[1]["percentage"] == 33.33


def test_payment_analytics(client, organizer_headers, user_headers, venue, slot, monkeypatch):
    from venue_booking_api.app.core.config import settings

    def pay(start_hour, end_hour, method):
        start, end = slot(start_hour, end_hour)
        return client.post(
            "/api/v1/payments/process",
            json={
                "payment_method": method,
                "venue_id": venue["id"],
                "people_count": 10,
                "start_time": start,
                "end_time": end,
            },
            headers=user_headers,
        ).json()

    pay(8, 10, "card")
    refunded = pay(10, 12, "bkash")
    pay(12, 14, "bkash")
    monkeypatch.setattr(settings, "payment_success_rate", 0.0)
    pay(14, 16, "card")
    client.post(
        "/api/v1/payments/refund",
        json={"payment_id": refunded["payment"]["id"], "reason": "Venue double checked"},
        headers=user_headers,
    )

    stats = client.get("/api/v1/admin/analytics/payments", headers=organizer_headers).json()
    assert stats["total_transactions"] == 4
    assert stats["total_revenue"] == 2260.0
    assert stats["success_rate"] == 50.0
    assert stats["average_transaction_value"] == 1130.0
    assert stats["refund_rate"] == 33.33
    assert {m["method"]: m["count"] for m in stats["payment_method_breakdown"]} == {"card": 2, "bkash": 2}
    assert len(stats["monthly_trends"]) == 1
    assert stats["monthly_trends"][0]["transactions"] == 2
    assert stats["top_venues"][0]["venue_name"] == "Grand Ballroom"
    assert stats["top_venues"][0]["bookings"] == 2


def test_analytics_requires_organizer(client, user_headers):
    assert client.get("/api/v1/admin/analytics/dashboard").status_code == 401
    assert client.get("/api/v1/admin/analytics/dashboard", headers=user_headers).status_code == 403
