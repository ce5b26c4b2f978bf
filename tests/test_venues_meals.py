def test_create_and_read_venue(client, venue):
    assert venue["name"] == "Grand Ballroom"
    assert venue["facilities"] == ["parking", "stage"]
    assert venue["country"] == "Bangladesh"
    assert venue["is_active"] is True

    resp = client.get(f"/api/v1/venues/{venue['id']}")
    assert resp.status_code == 200
    assert resp.json()["facilities"] == ["parking", "stage"]


def test_venue_name_must_be_unique(client, venue, organizer_headers):
    resp = client.post(
        "/api/v1/admin/venues",
        json={"name": "grand ballroom", "price_per_day": 10},
        headers=organizer_headers,
    )
    assert resp.status_code == 409
    assert resp.json()["error"]["message"] == "Venue name already exists"


def test_venue_name_unique_index(client, make_venue, organizer_headers, monkeypatch):
    from venue_booking_api.app.repositories.venue_repository import VenueRepository

    make_venue()
    garden = make_venue(name="Garden")
    # Bypass the lookup so only the database constraint stands in the way.
    monkeypatch.setattr(VenueRepository, "find_by_name", classmethod(lambda cls, name, exclude_id=None: None))

    created = client.post(
        "/api/v1/admin/venues",
        json={"name": "GRAND BALLROOM", "price_per_day": 10},
        headers=organizer_headers,
    )
    assert created.status_code == 409
    renamed = client.put(
        f"/api/v1/admin/venues/{garden['id']}",
        json={"name": "Grand Ballroom"},
        headers=organizer_headers,
    )
    assert renamed.status_code == 409
    assert renamed.json()["error"]["message"] == "Venue name already exists"


def test_venue_creation_requires_organizer(client, user_headers):
    payload = {"name": "Hall", "price_per_day": 10}
    assert client.post("/api/v1/admin/venues", json=payload).status_code == 401
    assert client.post("/api/v1/admin/venues", json=payload, headers=user_headers).status_code == 403


def test_list_venues_filters_and_pagination(client, make_venue):
    make_venue(name="Small Room", capacity=20, price_per_day=100)
    make_venue(name="Mid Hall", capacity=150, price_per_day=500, city="Chittagong")
    make_venue(name="Huge Arena", capacity=5000, price_per_day=9000)

    resp = client.get("/api/v1/venues", params={"limit": 2})
    body = resp.json()
    assert [v["name"] for v in body["venues"]] == ["Huge Arena", "Mid Hall"]
    assert body["pagination"] == {
        "page": 1,
        "limit": 2,
        "total": 3,
        "total_pages": 2,
        "has_next": True,
        "has_prev": False,
    }

    page2 = client.get("/api/v1/venues", params={"limit": 2, "page": 2}).json()
    assert [v["name"] for v in page2["venues"]] == ["Small Room"]
    assert page2["pagination"]["has_prev"] is True

    by_capacity = client.get("/api/v1/venues", params={"min_capacity": 100, "max_capacity": 1000}).json()
    assert [v["name"] for v in by_capacity["venues"]] == ["Mid Hall"]

    by_price = client.get("/api/v1/venues", params={"max_price": 500}).json()
    assert {v["name"] for v in by_price["venues"]} == {"Small Room", "Mid Hall"}

    by_search = client.get("/api/v1/venues", params={"search": "chittagong"}).json()
    assert [v["name"] for v in by_search["venues"]] == ["Mid Hall"]


def test_invalid_query_is_a_validation_error(client):
    resp = client.get("/api/v1/venues", params={"limit": 500})
    assert resp.status_code == 400
    assert resp.json()["error"]["details"][0]["field"] == "limit"


def test_inactive_venue_hidden_from_public(client, venue, organizer_headers):
    resp = client.put(f"/api/v1/admin/venues/{venue['id']}", json={"is_active": False}, headers=organizer_headers)
    assert resp.status_code == 200
    assert resp.json()["is_active"] is False

    assert client.get(f"/api/v1/venues/{venue['id']}").status_code == 404
    assert client.get("/api/v1/venues").json()["pagination"]["total"] == 0

    admin = client.get("/api/v1/admin/venues", headers=organizer_headers).json()
    assert admin["pagination"]["total"] == 1
    assert client.get(f"/api/v1/admin/venues/{venue['id']}", headers=organizer_headers).status_code == 200


def test_update_venue_partially(client, make_venue, organizer_headers):
    venue = make_venue()
    other = make_venue(name="Garden")

    resp = client.put(
        f"/api/v1/admin/venues/{venue['id']}",
        json={"price_per_day": 1500, "amenities": ["wifi"]},
        headers=organizer_headers,
    )
    body = resp.json()
    assert resp.status_code == 200
    assert body["price_per_day"] == 1500
    assert body["amenities"] == ["wifi"]
    assert body["name"] == "Grand Ballroom"
    assert body["capacity"] == 200

    clash = client.put(f"/api/v1/admin/venues/{other['id']}", json={"name": "Grand Ballroom"}, headers=organizer_headers)
    assert clash.status_code == 409

    # Renaming to its own name is not a conflict.
    same = client.put(f"/api/v1/admin/venues/{venue['id']}", json={"name": "Grand Ballroom"}, headers=organizer_headers)
    assert same.status_code == 200


def test_delete_venue(client, venue, organizer_headers):
    resp = client.delete(f"/api/v1/admin/venues/{venue['id']}", headers=organizer_headers)
    assert resp.status_code == 204
    assert client.get(f"/api/v1/venues/{venue['id']}").status_code == 404
    assert client.delete(f"/api/v1/admin/venues/{venue['id']}", headers=organizer_headers).status_code == 404


def test_delete_booked_venue_conflicts(client, venue, organizer_headers, book):
    assert book().status_code == 201
    resp = client.delete(f"/api/v1/admin/venues/{venue['id']}", headers=organizer_headers)
    assert resp.status_code == 409
    assert resp.json()["error"]["message"] == "Cannot delete venue with existing events"


def test_create_and_filter_meals(client, make_meal):
    buffet = make_meal()
    make_meal(name="Veggie Delight", type="veg", price_per_person=5, cuisine="indian")
    assert buffet["minimum_guests"] == 20

    vegs = client.get("/api/v1/meals", params={"type": "veg"}).json()
    assert [m["name"] for m in vegs["meals"]] == ["Veggie Delight"]

    cheap = client.get("/api/v1/meals", params={"max_price": 6}).json()
    assert [m["name"] for m in cheap["meals"]] == ["Veggie Delight"]

    search = client.get("/api/v1/meals", params={"search": "INDIAN"}).json()
    assert [m["name"] for m in search["meals"]] == ["Veggie Delight"]

    assert client.get("/api/v1/meals", params={"type": "vegan"}).status_code == 400


def test_meal_defaults_and_update(client, organizer_headers):
    created = client.post(
        "/api/v1/admin/meals",
        json={"name": "Snacks", "type": "veg", "price_per_person": 3},
        headers=organizer_headers,
    )
    assert created.status_code == 201
    meal = created.json()
    assert meal["minimum_guests"] == 1
    assert meal["special_dietary"] == []

    resp = client.put(
        f"/api/v1/admin/meals/{meal['id']}",
        json={"special_dietary": ["halal"], "is_active": False},
        headers=organizer_headers,
    )
    assert resp.json()["special_dietary"] == ["halal"]
    assert client.get(f"/api/v1/meals/{meal['id']}").status_code == 404
    assert client.get(f"/api/v1/admin/meals/{meal['id']}", headers=organizer_headers).status_code == 200


def test_delete_meal_in_use_conflicts(client, meal, organizer_headers, book):
    assert book(meal_id=meal["id"]).status_code == 201
    resp = client.delete(f"/api/v1/admin/meals/{meal['id']}", headers=organizer_headers)
    assert resp.status_code == 409
    assert resp.json()["error"]["message"].startswith("Cannot delete meal")


def test_unknown_meal_is_not_found(client, organizer_headers):
    assert client.get("/api/v1/meals/999").status_code == 404
    assert client.delete("/api/v1/admin/meals/999", headers=organizer_headers).status_code == 404
