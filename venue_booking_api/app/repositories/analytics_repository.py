"""
Read-only queries backing the admin analytics endpoints.

Rows are returned flat; grouping and ratios are computed in Python by
``AnalyticsService`` so that periods such as ISO weeks do not depend on
SQLite date functions.
"""

from typing import Any, Dict, List, Optional

from ..core.db import get_connection
from .base import build_where


def _range_clauses(column: str, start: Optional[str], end: Optional[str]):
    clauses: list[str] = []
    params: list = []
    if start:
        clauses.append(f"{column} >= ?")
        params.append(start)
    if end:
        clauses.append(f"{column} <= ?")
        params.append(end)
    return clauses, params


class AnalyticsRepository:

    @classmethod
    def events_in_range(cls, start: Optional[str] = None, end: Optional[str] = None) -> List[Dict[str, Any]]:
        """Events created within ``[start, end]`` with venue and meal pricing."""
        clauses, params = _range_clauses("e.created_at", start, end)
        conn = get_connection()
        try:
            rows = conn.execute(
                f"""
                SELECT e.id, e.event_type, e.people_count, e.total_cost, e.status, e.created_at,
                       v.id AS venue_id, v.name AS venue_name,
                       m.id AS meal_id, m.name AS meal_name, m.price_per_person AS meal_price_per_person
                FROM events e
                JOIN venues v ON v.id = e.venue_id
                LEFT JOIN meals m ON m.id = e.meal_id
                {build_where(clauses)}
                ORDER BY e.created_at ASC
                """,
                params,
            ).fetchall()
            return [dict(r) for r in rows]
        finally:
            conn.close()

    @classmethod
    def payments_in_range(cls, start: Optional[str] = None, end: Optional[str] = None) -> List[Dict[str, Any]]:
        """Payments created within ``[start, end]`` with the booked venue."""
        clauses, params = _range_clauses("p.created_at", start, end)
        conn = get_connection()
        try:
            rows = conn.execute(
                f"""
                SELECT p.id, p.amount, p.method, p.status, p.created_at,
                       v.id AS venue_id, v.name AS venue_name
                FROM payments p
                JOIN events e ON e.id = p.event_id
                JOIN venues v ON v.id = e.venue_id
                {build_where(clauses)}
                ORDER BY p.created_at ASC
                """,
                params,
            ).fetchall()
            return [dict(r) for r in rows]
        finally:
            conn.close()
