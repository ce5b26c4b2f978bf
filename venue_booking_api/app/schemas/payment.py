"""
Pydantic models for payments, cost quotes, refunds and gateway webhooks.
"""

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from .common import Pagination
from .event import BookingSlot, EventRead, TimeSlot


PaymentMethod = Literal["card", "bkash", "nagad", "rocket"]
PaymentStatus = Literal["pending", "success", "failed", "refunded"]


class PaymentMethodInfo(BaseModel):
    id: str
    name: str
    description: str


class PaymentMethodList(BaseModel):
    methods: List[PaymentMethodInfo]


class CostRequest(TimeSlot):
    venue_id: int = Field(..., ge=1)
    meal_id: Optional[int] = Field(None, ge=1)
    people_count: int = Field(..., ge=1, le=10000)


class VenueCost(BaseModel):
    name: str
    price_per_day: float
    days: int
    cost: float


class MealCost(BaseModel):
    name: str
    price_per_person: float
    people: int
    cost: float


class Fees(BaseModel):
    tax: float
    service_fee: float


class CostBreakdownDetail(BaseModel):
    venue: VenueCost
    meal: Optional[MealCost] = None
    fees: Fees


class CostBreakdown(BaseModel):
    venue_cost: float
    meal_cost: float
    subtotal: float
    tax: float
    service_fee: float
    total: float
    breakdown: CostBreakdownDetail


class ProcessPaymentRequest(BookingSlot):
    payment_method: PaymentMethod = Field(..., examples=["bkash"])
    venue_id: int = Field(..., ge=1)
    meal_id: Optional[int] = Field(None, ge=1)
    people_count: int = Field(..., ge=1, le=10000)
    event_type: str = Field("Event", min_length=1, max_length=100)


class PaymentRead(BaseModel):
    id: int
    event_id: int
    amount: float
    method: str
    status: PaymentStatus
    transaction_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }


class ProcessPaymentResponse(BaseModel):
    success: bool
    message: str
    event: EventRead
    payment: PaymentRead
    transaction_id: str
    cost_breakdown: CostBreakdown


class PaymentStatusRequest(BaseModel):
    transaction_id: str = Field(..., min_length=1)


class PaymentStatusResponse(BaseModel):
    payment_id: int
    event_id: int
    status: PaymentStatus
    amount: float
    method: str
    transaction_id: str
    created_at: datetime
    updated_at: datetime


class RefundRequest(BaseModel):
    payment_id: int = Field(..., ge=1)
    reason: str = Field(..., min_length=10, max_length=500)


class RefundRecord(BaseModel):
    id: str
    payment_id: int
    amount: float
    reason: str
    status: Literal["success"]
    transaction_id: str
    processed_at: datetime


class RefundResponse(BaseModel):
    success: bool
    message: str
    refund: RefundRecord


class HistoryVenue(BaseModel):
    id: int
    name: str
    address: Optional[str] = None


class HistoryMeal(BaseModel):
    id: int
    name: str
    type: str


class HistoryEvent(BaseModel):
    id: int
    event_type: str
    start_time: datetime
    end_time: datetime
    people_count: int
    status: str
    venue: HistoryVenue
    meal: Optional[HistoryMeal] = None


class PaymentHistoryItem(PaymentRead):
    event: HistoryEvent


class PaymentSummary(BaseModel):
    total_amount: float
    successful_payments: int
    failed_payments: int
    refunded_payments: int


class PaymentHistory(BaseModel):
    payments: List[PaymentHistoryItem]
    pagination: Pagination
    summary: PaymentSummary


class WebhookPayload(BaseModel):
    """Callback body sent by the payment gateway.

    ``signature`` is the gateway's HMAC over ``"<transaction_id>:<status>"``.
    """

    transaction_id: str = Field(..., min_length=1)
    status: Literal["pending", "success", "failed"]
    amount: Optional[float] = Field(None, ge=0)
    method: Optional[str] = None
    timestamp: Optional[datetime] = None
    signature: Optional[str] = None


class RefundWebhookPayload(WebhookPayload):
    """Refund callback; ``transaction_id`` identifies the refund itself."""

    original_transaction_id: str = Field(..., min_length=1)


class WebhookResponse(BaseModel):
    success: bool
    message: str
    transaction_id: Optional[str] = None
    error: Optional[str] = None
