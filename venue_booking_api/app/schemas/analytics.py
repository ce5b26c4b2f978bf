"""Response models for organizer analytics."""

from typing import List

from pydantic import BaseModel


class DashboardStats(BaseModel):
    total_events: int
    total_revenue: float
    average_event_value: float
    total_users: int
    total_venues: int
    total_meals: int
    recent_events: int
    pending_events: int
    confirmed_events: int
    cancelled_events: int


class RevenuePeriod(BaseModel):
    period: str
    total_revenue: float
    event_count: int
    average_event_value: float


class TopVenue(BaseModel):
    id: int
    name: str
    event_count: int
    total_revenue: float
    average_event_value: float


class TopMeal(BaseModel):
    id: int
    name: str
    order_count: int
    total_revenue: float
    average_order_value: float


class EventTypeStats(BaseModel):
    event_type: str
    count: int
    total_revenue: float
    average_value: float
    percentage: float


class MethodBreakdown(BaseModel):
    method: str
    count: int
    revenue: float
    percentage: float


class MonthlyTrend(BaseModel):
    month: str
    revenue: float
    transactions: int


class PaidVenue(BaseModel):
    venue_id: int
    venue_name: str
    revenue: float
    bookings: int


class PaymentAnalytics(BaseModel):
    total_revenue: float
    total_transactions: int
    success_rate: float
    average_transaction_value: float
    payment_method_breakdown: List[MethodBreakdown]
    monthly_trends: List[MonthlyTrend]
    refund_rate: float
    top_venues: List[PaidVenue]
