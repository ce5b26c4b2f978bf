"""Venue Booking API client.

A thin wrapper around the REST API built on ``requests``.  It is meant
for scripts and front-end backends that want to browse venues and
meals, quote and book events and pay for them without dealing with
HTTP details.

Every public method returns a tuple ``(data, error)``.  On success
``data`` holds the decoded JSON body and ``error`` is ``None``.  On
failure ``data`` is ``None`` and ``error`` is a dictionary with keys
``status_code`` and ``message``; the message is taken from the API's
error envelope when one is present.

Logging in stores the returned bearer token on the client, so later
calls are authenticated automatically::

    api = VenueBookingAPI(base_url="http://localhost:8000")
    user, error = api.login("jane@example.com", "Secret123!")
    venues, error = api.list_venues(search="hall")
"""

import logging
from typing import Any, Dict, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Any], Optional[Dict[str, Any]]]


class VenueBookingAPI:
    """Client for the customer-facing part of the Venue Booking API."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
        api_prefix: str = "/api/v1",
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Server root, e.g. ``http://localhost:8000``.
            api_key: Optional bearer token sent with every request.
            session: Optional requests session; one is created if omitted.
            api_prefix: Path prefix of the versioned API.
            timeout: Per-request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/") + api_prefix
        self.api_key = api_key
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # HTTP plumbing
    # ------------------------------------------------------------------
    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict):
            error = body.get("error")
            if isinstance(error, dict) and error.get("message"):
                return error["message"]
            return body.get("message") or body.get("detail") or str(body)
        return str(body)

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json_body: Optional[Any] = None,
    ) -> Result:
        """Perform an HTTP request against the API.

        Query parameters whose value is ``None`` are dropped.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        if params:
            params = {k: v for k, v in params.items() if v is not None}
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            message = self._error_message(exc.response) if exc.response is not None else ""
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------
    def register(self, name: str, email: str, password: str, phone: Optional[str] = None) -> Result:
        data, error = self._request(
            "POST",
            "/auth/register",
            json_body={"name": name, "email": email, "password": password, "phone": phone},
        )
        if data:
            self.api_key = data.get("token")
        return data, error

    def login(self, email: str, password: str) -> Result:
        """Log in and remember the returned token for later calls."""
        data, error = self._request("POST", "/auth/login", json_body={"email": email, "password": password})
        if data:
            self.api_key = data.get("token")
        return data, error

    def me(self) -> Result:
        return self._request("GET", "/auth/me")

    # ------------------------------------------------------------------
    # Catalogue
    # ------------------------------------------------------------------
    def list_venues(self, **filters: Any) -> Result:
        """List active venues.

        Accepts the API's query filters as keyword arguments: ``page``,
        ``limit``, ``search``, ``min_capacity``, ``max_capacity``,
        ``min_price`` and ``max_price``.
        """
        return self._request("GET", "/venues", params=filters)

    def get_venue(self, venue_id: int) -> Result:
        return self._request("GET", f"/venues/{venue_id}")

    def list_meals(self, **filters: Any) -> Result:
        return self._request("GET", "/meals", params=filters)

    def get_meal(self, meal_id: int) -> Result:
        return self._request("GET", f"/meals/{meal_id}")

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------
    def check_availability(self, venue_id: int, start_time: str, end_time: str) -> Result:
        return self._request(
            "POST",
            "/events/check-availability",
            json_body={"venue_id": venue_id, "start_time": start_time, "end_time": end_time},
        )

    def calculate_cost(
        self,
        venue_id: int,
        start_time: str,
        end_time: str,
        people_count: int,
        meal_id: Optional[int] = None,
    ) -> Result:
        return self._request(
            "POST",
            "/payments/calculate-cost",
            json_body={
                "venue_id": venue_id,
                "meal_id": meal_id,
                "people_count": people_count,
                "start_time": start_time,
                "end_time": end_time,
            },
        )

    def create_event(self, payload: Dict[str, Any]) -> Result:
        """Book an event without paying; ``payload`` follows ``POST /events``."""
        return self._request("POST", "/events", json_body=payload)

    def list_events(self, **filters: Any) -> Result:
        return self._request("GET", "/events", params=filters)

    def get_event(self, event_id: int) -> Result:
        return self._request("GET", f"/events/{event_id}")

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------
    def payment_methods(self) -> Result:
        return self._request("GET", "/payments/methods")

    def process_payment(self, payload: Dict[str, Any]) -> Result:
        """Book and pay in one call.

        A declined payment comes back as an error with status 400 and
        the gateway's message.
        """
        return self._request("POST", "/payments/process", json_body=payload)

    def payment_status(self, transaction_id: str) -> Result:
        return self._request("POST", "/payments/status", json_body={"transaction_id": transaction_id})

    def refund(self, payment_id: int, reason: str) -> Result:
        return self._request("POST", "/payments/refund", json_body={"payment_id": payment_id, "reason": reason})

    def payment_history(self, **filters: Any) -> Result:
        return self._request("GET", "/payments/history", params=filters)
