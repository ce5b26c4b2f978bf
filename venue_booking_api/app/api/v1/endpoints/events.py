"""
Event booking endpoints for API v1.

Customers check availability, book venues and manage their own
bookings under ``/events``.  Organizers see and moderate every booking
under ``/admin/events``.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from venue_booking_api.app.core.security import ROLE_ORGANIZER, ROLE_USER, require_roles
from venue_booking_api.app.schemas.event import (
    AdminEventList,
    AdminEventRead,
    AvailabilityRequest,
    AvailabilityResponse,
    EventCreate,
    EventList,
    EventRead,
    EventStatus,
    EventStatusUpdate,
    EventUpdate,
)
from venue_booking_api.app.services.event_service import EventService


router = APIRouter()
admin_router = APIRouter(dependencies=[Depends(require_roles(ROLE_ORGANIZER))])

require_customer = require_roles(ROLE_USER)


@router.post("/check-availability", response_model=AvailabilityResponse)
async def check_availability(request: AvailabilityRequest) -> AvailabilityResponse:
    """Check whether a venue is free for a time slot.

    Always answers 200 for an existing venue; ``available`` tells the
    outcome and ``conflicting_events`` lists the bookings in the way.
    """
    return await EventService.check_availability(request)


@router.post("", response_model=EventRead, status_code=status.HTTP_201_CREATED)
async def create_event(
    event: EventCreate,
    current_user: Dict[str, Any] = Depends(require_customer),
) -> EventRead:
    """Book a venue.

    The event is stored as ``pending`` with its computed total cost.
    Responds 409 when the slot overlaps another active booking.
    """
    return await EventService.create_event(current_user["user_id"], event)


@router.get("", response_model=EventList)
async def list_my_events(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[EventStatus] = Query(None),
    event_type: Optional[str] = Query(None),
    current_user: Dict[str, Any] = Depends(require_customer),
) -> EventList:
    return await EventService.list_user_events(
        current_user["user_id"], page=page, limit=limit, status=status, event_type=event_type
    )


@router.get("/{event_id}", response_model=EventRead)
async def get_my_event(
    event_id: int,
    current_user: Dict[str, Any] = Depends(require_customer),
) -> EventRead:
    return await EventService.get_user_event(event_id, current_user["user_id"])


@router.put("/{event_id}", response_model=EventRead)
async def update_my_event(
    event_id: int,
    event: EventUpdate,
    current_user: Dict[str, Any] = Depends(require_customer),
) -> EventRead:
    return await EventService.update_user_event(event_id, current_user["user_id"], event)


@admin_router.get("", response_model=AdminEventList)
async def admin_list_events(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    status: Optional[EventStatus] = Query(None),
    event_type: Optional[str] = Query(None),
    venue_id: Optional[int] = Query(None),
    user_id: Optional[int] = Query(None),
) -> AdminEventList:
    """List every booking with its customer, newest first."""
    return await EventService.list_all_events(
        page=page,
        limit=limit,
        status=status,
        event_type=event_type,
        venue_id=venue_id,
        user_id=user_id,
    )


@admin_router.get("/{event_id}", response_model=AdminEventRead)
async def admin_get_event(event_id: int) -> AdminEventRead:
    return await EventService.get_event(event_id)


@admin_router.patch("/{event_id}/status", response_model=AdminEventRead)
async def admin_update_event_status(event_id: int, payload: EventStatusUpdate) -> AdminEventRead:
    return await EventService.update_status(event_id, payload.status)
