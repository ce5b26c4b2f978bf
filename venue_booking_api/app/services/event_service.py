"""
Business logic for event bookings.

A booking reserves a venue (and optionally a catering meal) for a
time slot.  Before an event is stored the service checks, in order:

1. the venue exists and is active (404),
2. the meal, if any, exists and is active (404),
3. the guest count meets the meal's minimum (400),
4. the guest count fits the venue's capacity (400),
5. no other non-cancelled event at the venue overlaps the slot (409).

The total cost is computed by ``cost_calculator`` and stored on the
event, which starts out ``pending``.  Payment processing moves it to
``confirmed`` or ``cancelled``.

The availability check and the insert are not done in one
transaction, so two simultaneous bookings for the same slot can both
succeed.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from ..core.db import as_naive_utc, to_db_time, utcnow
from ..core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError
from ..repositories.event_repository import EventRepository
from ..repositories.meal_repository import MealRepository
from ..repositories.venue_repository import VenueRepository
from ..schemas.common import Pagination
from ..schemas.event import (
    AdminEventList,
    AdminEventRead,
    AvailabilityRequest,
    AvailabilityResponse,
    AvailabilityVenue,
    ConflictingEvent,
    EventCreate,
    EventList,
    EventRead,
    EventUpdate,
)
from ..schemas.payment import CostBreakdown
from .cost_calculator import calculate_cost


logger = logging.getLogger(__name__)

DISPLAY_FORMAT = "%Y-%m-%d %H:%M UTC"


def _display(value: Any) -> str:
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return as_naive_utc(value).strftime(DISPLAY_FORMAT)


class EventService:
    """Venue availability, booking creation and event lifecycle."""

    # ------------------------------------------------------------------
    # Shared validation
    # ------------------------------------------------------------------
    @classmethod
    def load_venue(cls, venue_id: int, active_only: bool = True) -> Dict[str, Any]:
        venue = VenueRepository.find_by_id(venue_id)
        if not venue or (active_only and not venue["is_active"]):
            logger.warning("Booking rejected, venue %s not found", venue_id)
            raise NotFoundError("The selected venue could not be found. Please choose a different venue.")
        return venue

    @classmethod
    def load_meal(cls, meal_id: Optional[int], active_only: bool = True) -> Optional[Dict[str, Any]]:
        if meal_id is None:
            return None
        meal = MealRepository.find_by_id(meal_id)
        if not meal or (active_only and not meal["is_active"]):
            logger.warning("Booking rejected, meal %s not found", meal_id)
            raise NotFoundError("The selected meal could not be found. Please choose a different meal.")
        return meal

    @classmethod
    def check_guests(cls, venue: Dict[str, Any], meal: Optional[Dict[str, Any]], people_count: int) -> None:
        if meal and people_count < meal["minimum_guests"]:
            raise BadRequestError(
                f"This meal requires a minimum of {meal['minimum_guests']} guests, "
                f"but you requested {people_count}"
            )
        if venue["capacity"] and people_count > venue["capacity"]:
            logger.warning(
                "Booking rejected, %s people exceed capacity %s of venue %s",
                people_count, venue["capacity"], venue["id"],
            )
            raise BadRequestError(
                f"Venue capacity is {venue['capacity']} people, but you requested {people_count} people"
            )

    @classmethod
    def find_conflicts(
        cls,
        venue_id: int,
        start: datetime,
        end: datetime,
        exclude_event_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        return EventRepository.find_conflicts(venue_id, to_db_time(start), to_db_time(end), exclude_event_id)

    @classmethod
    def ensure_available(
        cls,
        venue_id: int,
        start: datetime,
        end: datetime,
        exclude_event_id: Optional[int] = None,
    ) -> None:
        conflicts = cls.find_conflicts(venue_id, start, end, exclude_event_id)
        if conflicts:
            logger.warning("Venue %s not available, %d conflicting events", venue_id, len(conflicts))
            raise ConflictError(
                "Venue is no longer available for the selected time slot. Please check availability again."
            )

    @classmethod
    def ensure_revivable(cls, event: Dict[str, Any]) -> None:
        """Raise ``ConflictError`` when a cancelled event's slot was booked since."""
        cls.ensure_available(
            event["venue_id"],
            datetime.fromisoformat(event["start_time"]),
            datetime.fromisoformat(event["end_time"]),
            exclude_event_id=event["id"],
        )

    @classmethod
    def prepare_booking(
        cls,
        venue_id: int,
        meal_id: Optional[int],
        people_count: int,
        start: datetime,
        end: datetime,
    ) -> Tuple[Dict[str, Any], Optional[Dict[str, Any]], CostBreakdown]:
        """Run every booking check and return the venue, meal and quote."""
        venue = cls.load_venue(venue_id)
        meal = cls.load_meal(meal_id)
        cls.check_guests(venue, meal, people_count)
        cls.ensure_available(venue_id, start, end)
        return venue, meal, calculate_cost(venue, meal, people_count, start, end)

    @classmethod
    def store_event(
        cls,
        user_id: int,
        venue_id: int,
        meal_id: Optional[int],
        event_type: str,
        people_count: int,
        start: datetime,
        end: datetime,
        total_cost: float,
    ) -> Dict[str, Any]:
        row = EventRepository.create(
            {
                "user_id": user_id,
                "venue_id": venue_id,
                "meal_id": meal_id,
                "event_type": event_type,
                "people_count": people_count,
                "start_time": to_db_time(start),
                "end_time": to_db_time(end),
                "total_cost": total_cost,
                "status": "pending",
            }
        )
        logger.info("Event %s booked by user %s at venue %s", row["id"], user_id, venue_id)
        return row

    # ------------------------------------------------------------------
    # Customer operations
    # ------------------------------------------------------------------
    @classmethod
    async def check_availability(cls, data: AvailabilityRequest) -> AvailabilityResponse:
        """Report whether the venue is free for the requested slot.

        Unlike ``create_event`` this never fails because of a conflict;
        it returns ``available=False`` together with the conflicting
        events, earliest first.
        """
        logger.info(
            "Checking availability for venue %s from %s to %s",
            data.venue_id, to_db_time(data.start_time), to_db_time(data.end_time),
        )
        venue = cls.load_venue(data.venue_id)
        conflicts = cls.find_conflicts(data.venue_id, data.start_time, data.end_time)
        summary = AvailabilityVenue(**venue)
        if not conflicts:
            return AvailabilityResponse(
                available=True,
                message=(
                    f"{venue['name']} is available for your event from "
                    f"{_display(data.start_time)} to {_display(data.end_time)}"
                ),
                venue=summary,
            )
        details = ", ".join(
            f"{c['event_type']} from {_display(c['start_time'])} to {_display(c['end_time'])}"
            for c in conflicts
        )
        logger.info("Venue %s is not available, %d conflicting events", data.venue_id, len(conflicts))
        return AvailabilityResponse(
            available=False,
            message=(
                f"Sorry, {venue['name']} is not available for the requested time. "
                f"There are conflicting events: {details}. Please choose a different time slot."
            ),
            venue=summary,
            conflicting_events=[ConflictingEvent(**c) for c in conflicts],
        )

    @classmethod
    async def create_event(cls, user_id: int, data: EventCreate) -> EventRead:
        logger.info("Creating event for user %s at venue %s", user_id, data.venue_id)
        _, _, cost = cls.prepare_booking(
            data.venue_id, data.meal_id, data.people_count, data.start_time, data.end_time
        )
        row = cls.store_event(
            user_id,
            data.venue_id,
            data.meal_id,
            data.event_type,
            data.people_count,
            data.start_time,
            data.end_time,
            cost.total,
        )
        return EventRead(**row)

    @classmethod
    async def list_user_events(
        cls,
        user_id: int,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        event_type: Optional[str] = None,
    ) -> EventList:
        rows, total = EventRepository.list(
            page, limit, {"user_id": user_id, "status": status, "event_type": event_type}
        )
        return EventList(events=[EventRead(**r) for r in rows], pagination=Pagination.build(page, limit, total))

    @classmethod
    def _owned_event(cls, event_id: int, user_id: int) -> Dict[str, Any]:
        row = EventRepository.find_by_id(event_id)
        if not row:
            raise NotFoundError("The requested event could not be found.")
        if row["user_id"] != user_id:
            logger.warning("User %s tried to access event %s of user %s", user_id, event_id, row["user_id"])
            raise ForbiddenError("You do not have permission to access this event.")
        return row

    @classmethod
    async def get_user_event(cls, event_id: int, user_id: int) -> EventRead:
        return EventRead(**cls._owned_event(event_id, user_id))

    @classmethod
    async def update_user_event(cls, event_id: int, user_id: int, data: EventUpdate) -> EventRead:
        """Apply a partial update to the caller's event.

        The merged booking is validated like a new one: the slot must be
        well formed (and start in the future when it moves), guests must
        fit the venue and meal, and the venue must be free apart from
        this very event.  The cost is recomputed from current prices.
        """
        current = cls._owned_event(event_id, user_id)
        if current["status"] == "cancelled":
            raise BadRequestError("Cancelled events cannot be updated")

        updates = {k: v for k, v in data.model_dump().items() if v is not None}
        start = as_naive_utc(updates.get("start_time") or datetime.fromisoformat(current["start_time"]))
        end = as_naive_utc(updates.get("end_time") or datetime.fromisoformat(current["end_time"]))
        if end <= start:
            raise BadRequestError("End time must be after start time")
        slot_moved = "start_time" in updates or "end_time" in updates
        if slot_moved and start <= utcnow():
            raise BadRequestError("Event start time must be in the future")

        people_count = updates.get("people_count", current["people_count"])
        meal_id = updates.get("meal_id", current["meal_id"])
        # A booking keeps its venue and meal after they are deactivated;
        # only a newly chosen meal must be active.
        venue = cls.load_venue(current["venue_id"], active_only=False)
        meal = cls.load_meal(meal_id, active_only=meal_id != current["meal_id"])
        cls.check_guests(venue, meal, people_count)
        cls.ensure_available(current["venue_id"], start, end, exclude_event_id=event_id)

        cost = calculate_cost(venue, meal, people_count, start, end)
        values = {
            "event_type": updates.get("event_type", current["event_type"]).strip(),
            "people_count": people_count,
            "meal_id": meal_id,
            "start_time": to_db_time(start),
            "end_time": to_db_time(end),
            "total_cost": cost.total,
        }
        row = EventRepository.update(event_id, values)
        logger.info("User %s updated event %s", user_id, event_id)
        return EventRead(**row)

    # ------------------------------------------------------------------
    # Organizer operations
    # ------------------------------------------------------------------
    @classmethod
    async def list_all_events(
        cls,
        page: int = 1,
        limit: int = 10,
        status: Optional[str] = None,
        event_type: Optional[str] = None,
        venue_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> AdminEventList:
        rows, total = EventRepository.list(
            page,
            limit,
            {"status": status, "event_type": event_type, "venue_id": venue_id, "user_id": user_id},
        )
        return AdminEventList(
            events=[AdminEventRead(**r) for r in rows],
            pagination=Pagination.build(page, limit, total),
        )

    @classmethod
    async def get_event(cls, event_id: int) -> AdminEventRead:
        row = EventRepository.find_by_id(event_id)
        if not row:
            raise NotFoundError("The requested event could not be found.")
        return AdminEventRead(**row)

    @classmethod
    async def update_status(cls, event_id: int, status: str) -> AdminEventRead:
        """Set an event's status.

        Reviving a cancelled event re-checks the venue, since its slot
        may have been booked by someone else in the meantime.
        """
        current = EventRepository.find_by_id(event_id)
        if not current:
            raise NotFoundError("The requested event could not be found.")
        if current["status"] == "cancelled" and status != "cancelled":
            cls.ensure_revivable(current)
        row = EventRepository.update_status(event_id, status)
        logger.info("Event %s status set to %s", event_id, status)
        return AdminEventRead(**row)
