"""
Service layer for organizer analytics.

Booking analytics are computed over events whose ``created_at`` falls
in an optional ``[start_date, end_date]`` window; revenue there means
the events' stored ``total_cost``.  Payment analytics work on the
``payments`` table instead and only count successful payments as
revenue.

Aggregation happens in Python over the rows returned by
``AnalyticsRepository``, which keeps period bucketing (notably weeks
starting on Sunday) independent of SQL dialect.
"""

import logging
from collections import OrderedDict, defaultdict
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..core.db import as_naive_utc, to_db_time, utcnow
from ..core.exceptions import BadRequestError
from ..repositories.account_repository import UserRepository
from ..repositories.analytics_repository import AnalyticsRepository
from ..repositories.meal_repository import MealRepository
from ..repositories.venue_repository import VenueRepository
from ..schemas.analytics import (
    DashboardStats,
    EventTypeStats,
    MethodBreakdown,
    MonthlyTrend,
    PaidVenue,
    PaymentAnalytics,
    RevenuePeriod,
    TopMeal,
    TopVenue,
)


logger = logging.getLogger(__name__)

GROUP_BY_CHOICES = ("day", "week", "month", "year")
RECENT_DAYS = 30


def _money(value: float) -> float:
    return round(value, 2)


def _avg(total: float, count: int) -> float:
    return _money(total / count) if count else 0.0


def _pct(part: float, whole: float) -> float:
    return round(part / whole * 100, 2) if whole else 0.0


def period_key(created_at: str, group_by: str) -> str:
    """Bucket a stored timestamp into a reporting period label.

    ``day`` -> ``YYYY-MM-DD``; ``week`` -> date of the Sunday starting
    the week; ``month`` -> ``YYYY-MM``; ``year`` -> ``YYYY``.
    """
    day = datetime.fromisoformat(created_at).date()
    if group_by == "day":
        return day.isoformat()
    if group_by == "week":
        # date.weekday(): Monday == 0 ... Sunday == 6
        return (day - timedelta(days=(day.weekday() + 1) % 7)).isoformat()
    if group_by == "month":
        return f"{day.year:04d}-{day.month:02d}"
    if group_by == "year":
        return f"{day.year:04d}"
    raise BadRequestError(f"group_by must be one of: {', '.join(GROUP_BY_CHOICES)}")


class AnalyticsService:
    """Aggregated booking and payment statistics for organizers."""

    @classmethod
    def _window(cls, start_date: Optional[datetime], end_date: Optional[datetime]) -> Tuple[Optional[str], Optional[str]]:
        if start_date and end_date and as_naive_utc(start_date) >= as_naive_utc(end_date):
            raise BadRequestError("Start date must be before end date")
        return (
            to_db_time(start_date) if start_date else None,
            to_db_time(end_date) if end_date else None,
        )

    @classmethod
    def _events(cls, start_date: Optional[datetime], end_date: Optional[datetime]) -> List[Dict[str, Any]]:
        return AnalyticsRepository.events_in_range(*cls._window(start_date, end_date))

    @classmethod
    async def dashboard(cls, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None) -> DashboardStats:
        events = cls._events(start_date, end_date)
        total_revenue = sum(e["total_cost"] or 0 for e in events)
        recent_cutoff = to_db_time(utcnow() - timedelta(days=RECENT_DAYS))
        status_counts: Dict[str, int] = defaultdict(int)
        for event in events:
            status_counts[event["status"]] += 1
        logger.info("Dashboard computed over %d events", len(events))
        return DashboardStats(
            total_events=len(events),
            total_revenue=_money(total_revenue),
            average_event_value=_avg(total_revenue, len(events)),
            total_users=UserRepository.count(),
            total_venues=VenueRepository.count(),
            total_meals=MealRepository.count(),
            recent_events=sum(1 for e in events if e["created_at"] >= recent_cutoff),
            pending_events=status_counts["pending"],
            confirmed_events=status_counts["confirmed"],
            cancelled_events=status_counts["cancelled"],
        )

    @classmethod
    async def revenue(
        cls,
        group_by: str = "month",
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[RevenuePeriod]:
        if group_by not in GROUP_BY_CHOICES:
            raise BadRequestError(f"group_by must be one of: {', '.join(GROUP_BY_CHOICES)}")
        grouped: Dict[str, List[float]] = defaultdict(list)
        for event in cls._events(start_date, end_date):
            grouped[period_key(event["created_at"], group_by)].append(event["total_cost"] or 0)
        return [
            RevenuePeriod(
                period=period,
                total_revenue=_money(sum(costs)),
                event_count=len(costs),
                average_event_value=_avg(sum(costs), len(costs)),
            )
            for period, costs in sorted(grouped.items())
        ]

    @classmethod
    async def top_venues(
        cls,
        limit: int = 10,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[TopVenue]:
        stats: Dict[int, Dict[str, Any]] = OrderedDict()
        for event in cls._events(start_date, end_date):
            entry = stats.setdefault(event["venue_id"], {"name": event["venue_name"], "count": 0, "revenue": 0.0})
            entry["count"] += 1
            entry["revenue"] += event["total_cost"] or 0
        venues = [
            TopVenue(
                id=venue_id,
                name=entry["name"],
                event_count=entry["count"],
                total_revenue=_money(entry["revenue"]),
                average_event_value=_avg(entry["revenue"], entry["count"]),
            )
            for venue_id, entry in stats.items()
        ]
        venues.sort(key=lambda v: v.total_revenue, reverse=True)
        return venues[:limit]

    @classmethod
    async def top_meals(
        cls,
        limit: int = 10,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[TopMeal]:
        """Rank meals by catering revenue (price per person times guests)."""
        stats: Dict[int, Dict[str, Any]] = OrderedDict()
        for event in cls._events(start_date, end_date):
            if event["meal_id"] is None:
                continue
            entry = stats.setdefault(event["meal_id"], {"name": event["meal_name"], "count": 0, "revenue": 0.0})
            entry["count"] += 1
            entry["revenue"] += event["meal_price_per_person"] * event["people_count"]
        meals = [
            TopMeal(
                id=meal_id,
                name=entry["name"],
                order_count=entry["count"],
                total_revenue=_money(entry["revenue"]),
                average_order_value=_avg(entry["revenue"], entry["count"]),
            )
            for meal_id, entry in stats.items()
        ]
        meals.sort(key=lambda m: m.total_revenue, reverse=True)
        return meals[:limit]

    @classmethod
    async def event_types(
        cls,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[EventTypeStats]:
        events = cls._events(start_date, end_date)
        grouped: Dict[str, List[float]] = defaultdict(list)
        for event in events:
            grouped[event["event_type"]].append(event["total_cost"] or 0)
        result = [
            EventTypeStats(
                event_type=event_type,
                count=len(costs),
                total_revenue=_money(sum(costs)),
                average_value=_avg(sum(costs), len(costs)),
                percentage=_pct(len(costs), len(events)),
            )
            for event_type, costs in grouped.items()
        ]
        result.sort(key=lambda s: s.total_revenue, reverse=True)
        return result

    @classmethod
    async def payments(
        cls,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> PaymentAnalytics:
        """Summarise payments created in the window.

        ``success_rate`` is successful over all attempts and
        ``refund_rate`` is refunded over payments that were ever
        captured (successful or refunded), both in percent.
        """
        payments = AnalyticsRepository.payments_in_range(*cls._window(start_date, end_date))
        successful = [p for p in payments if p["status"] == "success"]
        refunded = [p for p in payments if p["status"] == "refunded"]
        revenue = sum(p["amount"] for p in successful)

        logger.info("Payment analytics computed over %d payments", len(payments))
        return PaymentAnalytics(
            total_revenue=_money(revenue),
            total_transactions=len(payments),
            success_rate=_pct(len(successful), len(payments)),
            average_transaction_value=_avg(revenue, len(successful)),
            payment_method_breakdown=cls._method_breakdown(payments, successful),
            monthly_trends=cls._monthly_trends(successful),
            refund_rate=_pct(len(refunded), len(successful) + len(refunded)),
            top_venues=cls._paid_venues(successful),
        )

    @classmethod
    def _method_breakdown(cls, payments: Iterable[Dict[str, Any]], successful: List[Dict[str, Any]]) -> List[MethodBreakdown]:
        counts: Dict[str, int] = defaultdict(int)
        revenue: Dict[str, float] = defaultdict(float)
        for payment in payments:
            counts[payment["method"]] += 1
        for payment in successful:
            revenue[payment["method"]] += payment["amount"]
        total = sum(counts.values())
        breakdown = [
            MethodBreakdown(
                method=method,
                count=count,
                revenue=_money(revenue[method]),
                percentage=_pct(count, total),
            )
            for method, count in counts.items()
        ]
        breakdown.sort(key=lambda b: b.count, reverse=True)
        return breakdown

    @classmethod
    def _monthly_trends(cls, successful: Iterable[Dict[str, Any]]) -> List[MonthlyTrend]:
        grouped: Dict[str, List[float]] = defaultdict(list)
        for payment in successful:
            grouped[period_key(payment["created_at"], "month")].append(payment["amount"])
        return [
            MonthlyTrend(month=month, revenue=_money(sum(amounts)), transactions=len(amounts))
            for month, amounts in sorted(grouped.items())
        ]

    @classmethod
    def _paid_venues(cls, successful: Iterable[Dict[str, Any]], limit: int = 5) -> List[PaidVenue]:
        stats: Dict[int, Dict[str, Any]] = OrderedDict()
        for payment in successful:
            entry = stats.setdefault(payment["venue_id"], {"name": payment["venue_name"], "revenue": 0.0, "bookings": 0})
            entry["revenue"] += payment["amount"]
            entry["bookings"] += 1
        venues = [
            PaidVenue(venue_id=venue_id, venue_name=e["name"], revenue=_money(e["revenue"]), bookings=e["bookings"])
            for venue_id, e in stats.items()
        ]
        venues.sort(key=lambda v: v.revenue, reverse=True)
        return venues[:limit]
