"""
Pydantic models for event bookings.

Booking time slots are half-open intervals ``[start_time, end_time)``.
Times may be sent with or without a UTC offset; values without one are
taken as UTC.  ``BookingSlot`` validates the slot shape shared by
availability checks, event creation and payment processing.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from ..core.db import as_naive_utc, utcnow
from .common import Pagination


EventStatus = Literal["pending", "confirmed", "cancelled"]


def _end_after_start(value: datetime, info: ValidationInfo) -> datetime:
    start = info.data.get("start_time")
    if start is not None and as_naive_utc(value) <= as_naive_utc(start):
        raise ValueError("End time must be after start time")
    return value


def _start_in_future(value: datetime) -> datetime:
    if as_naive_utc(value) <= utcnow():
        raise ValueError("Event start time must be in the future")
    return value


class TimeSlot(BaseModel):
    start_time: datetime = Field(..., examples=["2030-06-01T10:00:00Z"])
    end_time: datetime = Field(..., examples=["2030-06-01T22:00:00Z"])

    @field_validator("end_time")
    @classmethod
    def end_after_start(cls, value: datetime, info: ValidationInfo) -> datetime:
        return _end_after_start(value, info)


class BookingSlot(TimeSlot):
    """A slot that must also start in the future."""

    @field_validator("start_time")
    @classmethod
    def start_in_future(cls, value: datetime) -> datetime:
        return _start_in_future(value)


class AvailabilityRequest(BookingSlot):
    venue_id: int = Field(..., ge=1, examples=[1])


class ConflictingEvent(BaseModel):
    start_time: datetime
    end_time: datetime
    event_type: str


class AvailabilityVenue(BaseModel):
    id: int
    name: str
    address: Optional[str] = None
    capacity: Optional[int] = None
    price_per_day: float


class AvailabilityResponse(BaseModel):
    available: bool
    message: str
    venue: AvailabilityVenue
    conflicting_events: List[ConflictingEvent] = Field(default_factory=list)


class EventCreate(BookingSlot):
    venue_id: int = Field(..., ge=1, examples=[1])
    meal_id: Optional[int] = Field(None, ge=1, examples=[2])
    event_type: str = Field(..., min_length=2, max_length=100, examples=["wedding"])
    people_count: int = Field(..., ge=1, le=10000, examples=[150])

    @field_validator("event_type")
    @classmethod
    def strip_event_type(cls, value: str) -> str:
        return value.strip()


class EventUpdate(BaseModel):
    """Partial update of a customer's own booking.

    All fields are optional; only provided fields will be updated.  A
    new slot is validated against the stored one by the service.
    """

    meal_id: Optional[int] = Field(None, ge=1)
    event_type: Optional[str] = Field(None, min_length=2, max_length=100)
    people_count: Optional[int] = Field(None, ge=1, le=10000)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


class EventStatusUpdate(BaseModel):
    status: EventStatus


class EventVenue(BaseModel):
    id: int
    name: str
    address: Optional[str] = None
    city: Optional[str] = None
    capacity: Optional[int] = None
    price_per_day: float


class EventMeal(BaseModel):
    id: int
    name: str
    type: str
    price_per_person: float


class EventOwner(BaseModel):
    id: int
    name: str
    email: str


class EventRead(BaseModel):
    id: int
    user_id: int
    venue_id: int
    meal_id: Optional[int] = None
    event_type: str
    people_count: int
    start_time: datetime
    end_time: datetime
    total_cost: float
    status: EventStatus
    created_at: datetime
    updated_at: datetime
    venue: EventVenue
    meal: Optional[EventMeal] = None

    model_config = {
        "from_attributes": True,
    }


class AdminEventRead(EventRead):
    """Event as seen by organizers, including the booking customer."""

    user: EventOwner


class EventList(BaseModel):
    events: List[EventRead]
    pagination: Pagination


class AdminEventList(BaseModel):
    events: List[AdminEventRead]
    pagination: Pagination
