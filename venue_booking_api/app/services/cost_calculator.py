"""
Event cost calculation.

Venues are rented per started day: a booking of 25 hours pays for two
days.  Catering is charged per guest.  Tax and a service fee are
applied to the subtotal using the rates from ``Settings``.  All money
amounts are rounded to two decimals.
"""

import math
from datetime import datetime
from typing import Any, Dict, Optional

from ..core.config import settings
from ..core.db import as_naive_utc
from ..schemas.payment import CostBreakdown, CostBreakdownDetail, Fees, MealCost, VenueCost


SECONDS_PER_DAY = 24 * 60 * 60


def _money(value: float) -> float:
    return round(value, 2)


def rental_days(start: datetime, end: datetime) -> int:
    """Number of started days between ``start`` and ``end`` (at least one)."""
    seconds = (as_naive_utc(end) - as_naive_utc(start)).total_seconds()
    return max(1, math.ceil(seconds / SECONDS_PER_DAY))


def calculate_cost(
    venue: Dict[str, Any],
    meal: Optional[Dict[str, Any]],
    people_count: int,
    start: datetime,
    end: datetime,
) -> CostBreakdown:
    days = rental_days(start, end)
    venue_cost = _money(venue["price_per_day"] * days)
    meal_cost = _money(meal["price_per_person"] * people_count) if meal else 0.0
    subtotal = _money(venue_cost + meal_cost)
    tax = _money(subtotal * settings.tax_rate)
    service_fee = _money(subtotal * settings.service_fee_rate)
    total = _money(subtotal + tax + service_fee)

    meal_line = None
    if meal:
        meal_line = MealCost(
            name=meal["name"],
            price_per_person=meal["price_per_person"],
            people=people_count,
            cost=meal_cost,
        )
    return CostBreakdown(
        venue_cost=venue_cost,
        meal_cost=meal_cost,
        subtotal=subtotal,
        tax=tax,
        service_fee=service_fee,
        total=total,
        breakdown=CostBreakdownDetail(
            venue=VenueCost(
                name=venue["name"],
                price_per_day=venue["price_per_day"],
                days=days,
                cost=venue_cost,
            ),
            meal=meal_line,
            fees=Fees(tax=tax, service_fee=service_fee),
        ),
    )
