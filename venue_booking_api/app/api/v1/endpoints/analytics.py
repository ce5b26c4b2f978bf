"""
Organizer analytics endpoints for API v1.

All routes accept optional ``start_date``/``end_date`` (ISO 8601)
which restrict the statistics to records created in that window.
"""

from datetime import datetime
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query

from venue_booking_api.app.core.security import ROLE_ORGANIZER, require_roles
from venue_booking_api.app.schemas.analytics import (
    DashboardStats,
    EventTypeStats,
    PaymentAnalytics,
    RevenuePeriod,
    TopMeal,
    TopVenue,
)
from venue_booking_api.app.services.analytics_service import AnalyticsService


router = APIRouter(dependencies=[Depends(require_roles(ROLE_ORGANIZER))])


@router.get("/dashboard", response_model=DashboardStats)
async def dashboard(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
) -> DashboardStats:
    return await AnalyticsService.dashboard(start_date, end_date)


@router.get("/revenue", response_model=List[RevenuePeriod])
async def revenue(
    group_by: Literal["day", "week", "month", "year"] = Query("month"),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
) -> List[RevenuePeriod]:
    """Booking revenue per period; weeks start on Sunday."""
    return await AnalyticsService.revenue(group_by, start_date, end_date)


@router.get("/venues/top", response_model=List[TopVenue])
async def top_venues(
    limit: int = Query(10, ge=1, le=50),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
) -> List[TopVenue]:
    return await AnalyticsService.top_venues(limit, start_date, end_date)


@router.get("/meals/top", response_model=List[TopMeal])
async def top_meals(
    limit: int = Query(10, ge=1, le=50),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
) -> List[TopMeal]:
    return await AnalyticsService.top_meals(limit, start_date, end_date)


@router.get("/event-types", response_model=List[EventTypeStats])
async def event_types(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
) -> List[EventTypeStats]:
    return await AnalyticsService.event_types(start_date, end_date)


@router.get("/payments", response_model=PaymentAnalytics)
async def payment_analytics(
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
) -> PaymentAnalytics:
    """Revenue, success and refund rates, method mix and trends over payments."""
    return await AnalyticsService.payments(start_date, end_date)
