import json

import pytest
import requests

from venue_booking_client import VenueBookingAPI


def make_response(status_code, body=None):
    response = requests.Response()
    response.status_code = status_code
    response._content = json.dumps(body).encode("utf-8") if body is not None else b""
    response.url = "http://testserver"
    return response


class FakeSession:
    """Records calls and replays queued responses."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def request(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.responses.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def test_login_stores_token_for_later_calls():
    session = FakeSession(
        make_response(200, {"user": {"id": 1}, "token": "abc", "token_type": "bearer"}),
        make_response(200, {"id": 1, "email": "jane@example.com"}),
    )
    api = VenueBookingAPI(base_url="http://api.local/", session=session)

    data, error = api.login("jane@example.com", "Str0ng!Pass")
    assert error is None
    assert data["token"] == "abc"
    assert session.calls[0]["url"] == "http://api.local/api/v1/auth/login"
    assert session.calls[0]["headers"] == {}

    api.me()
    assert session.calls[1]["method"] == "GET"
    assert session.calls[1]["headers"] == {"Authorization": "Bearer abc"}


def test_none_query_params_are_dropped():
    session = FakeSession(make_response(200, {"venues": [], "pagination": {}}))
    api = VenueBookingAPI(base_url="http://api.local", session=session)
    api.list_venues(search="hall", min_capacity=None, page=2)
    assert session.calls[0]["params"] == {"search": "hall", "page": 2}


def test_error_envelope_message_is_returned():
    session = FakeSession(
        make_response(409, {"success": False, "error": {"message": "Venue is no longer available"}})
    )
    api = VenueBookingAPI(base_url="http://api.local", session=session, api_key="abc")
    data, error = api.create_event({"venue_id": 1})
    assert data is None
    assert error == {"status_code": 409, "message": "Venue is no longer available"}


def test_declined_payment_message():
    session = FakeSession(make_response(400, {"success": False, "message": "Payment processing failed."}))
    api = VenueBookingAPI(base_url="http://api.local", session=session, api_key="abc")
    data, error = api.process_payment({"venue_id": 1})
    assert data is None
    assert error["message"] == "Payment processing failed."


def test_connection_errors_are_reported():
    session = FakeSession(requests.ConnectionError("refused"))
    api = VenueBookingAPI(base_url="http://api.local", session=session)
    data, error = api.payment_methods()
    assert data is None
    assert error == {"status_code": None, "message": "refused"}


@pytest.mark.parametrize(
    "call, method, path, body",
    [
        (lambda api: api.check_availability(3, "s", "e"), "POST", "/events/check-availability",
         {"venue_id": 3, "start_time": "s", "end_time": "e"}),
        (lambda api: api.payment_status("CARD1"), "POST", "/payments/status", {"transaction_id": "CARD1"}),
        (lambda api: api.refund(5, "reason text"), "POST", "/payments/refund", {"payment_id": 5, "reason": "reason text"}),
        (lambda api: api.get_meal(4), "GET", "/meals/4", None),
    ],
)
def test_routes(call, method, path, body):
    session = FakeSession(make_response(200, {}))
    api = VenueBookingAPI(base_url="http://api.local", session=session)
    call(api)
    assert session.calls[0]["method"] == method
    assert session.calls[0]["url"] == f"http://api.local/api/v1{path}"
    assert session.calls[0]["json"] == body
