"""
Persistence for event bookings.

Besides the usual CRUD this module owns the venue overlap query.  An
existing non-cancelled event at the venue conflicts with a requested
``[start, end)`` slot when any of the following holds:

* it starts inside the slot (``start <= existing.start < end``),
* it ends inside the slot (``start < existing.end <= end``),
* it covers the whole slot (``existing.start <= start`` and
  ``existing.end >= end``).

Bookings that merely touch (one ends exactly when the other starts)
do not conflict.  Times are compared as stored strings, see
``core.db``.
"""

from typing import Any, Dict, List, Optional, Tuple

from ..core.db import get_connection
from .base import build_where, insert_statement, offset_for, update_statement


_EVENT_SELECT = """
    SELECT e.*,
           v.name AS venue_name, v.address AS venue_address, v.city AS venue_city,
           v.capacity AS venue_capacity, v.price_per_day AS venue_price_per_day,
           m.name AS meal_name, m.type AS meal_type, m.price_per_person AS meal_price_per_person,
           u.name AS user_name, u.email AS user_email
    FROM events e
    JOIN venues v ON v.id = e.venue_id
    LEFT JOIN meals m ON m.id = e.meal_id
    JOIN users u ON u.id = e.user_id
"""

_OVERLAP_CONDITION = """
    (
        (start_time >= ? AND start_time < ?)
        OR (end_time > ? AND end_time <= ?)
        OR (start_time <= ? AND end_time >= ?)
    )
"""


def _to_event(row) -> Optional[Dict[str, Any]]:
    """Fold the joined venue/meal/user columns into nested dictionaries."""
    if row is None:
        return None
    data = dict(row)
    event = {
        key: data[key]
        for key in (
            "id", "user_id", "venue_id", "meal_id", "event_type", "people_count",
            "start_time", "end_time", "total_cost", "status", "created_at", "updated_at",
        )
    }
    event["venue"] = {
        "id": data["venue_id"],
        "name": data["venue_name"],
        "address": data["venue_address"],
        "city": data["venue_city"],
        "capacity": data["venue_capacity"],
        "price_per_day": data["venue_price_per_day"],
    }
    event["meal"] = None
    if data["meal_id"] is not None:
        event["meal"] = {
            "id": data["meal_id"],
            "name": data["meal_name"],
            "type": data["meal_type"],
            "price_per_person": data["meal_price_per_person"],
        }
    event["user"] = {"id": data["user_id"], "name": data["user_name"], "email": data["user_email"]}
    return event


def _filter_clauses(filters: Dict[str, Any]) -> Tuple[List[str], List[Any]]:
    clauses: list[str] = []
    params: list = []
    if filters.get("user_id") is not None:
        clauses.append("e.user_id = ?")
        params.append(filters["user_id"])
    if filters.get("status"):
        clauses.append("e.status = ?")
        params.append(filters["status"])
    if filters.get("event_type"):
        clauses.append("e.event_type = ?")
        params.append(filters["event_type"])
    if filters.get("venue_id") is not None:
        clauses.append("e.venue_id = ?")
        params.append(filters["venue_id"])
    return clauses, params


class EventRepository:

    @classmethod
    def create(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        sql, params = insert_statement("events", values)
        conn = get_connection()
        try:
            cursor = conn.execute(sql, params)
            conn.commit()
            event_id = cursor.lastrowid
        finally:
            conn.close()
        return cls.find_by_id(event_id)

    @classmethod
    def find_by_id(cls, event_id: int) -> Optional[Dict[str, Any]]:
        conn = get_connection()
        try:
            row = conn.execute(f"{_EVENT_SELECT} WHERE e.id = ?", (event_id,)).fetchone()
            return _to_event(row)
        finally:
            conn.close()

    @classmethod
    def list(cls, page: int, limit: int, filters: Dict[str, Any]) -> Tuple[List[Dict[str, Any]], int]:
        """Return one page of events (newest first) and the total match count."""
        clauses, params = _filter_clauses(filters)
        where = build_where(clauses)
        conn = get_connection()
        try:
            total = conn.execute(f"SELECT COUNT(*) FROM events e{where}", params).fetchone()[0]
            rows = conn.execute(
                f"{_EVENT_SELECT}{where} ORDER BY e.created_at DESC, e.id DESC LIMIT ? OFFSET ?",
                [*params, limit, offset_for(page, limit)],
            ).fetchall()
            return [_to_event(r) for r in rows], total
        finally:
            conn.close()

    @classmethod
    def find_conflicts(
        cls,
        venue_id: int,
        start: str,
        end: str,
        exclude_event_id: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Return non-cancelled events at ``venue_id`` overlapping ``[start, end)``.

        Results are ordered by start time.  ``exclude_event_id`` lets an
        event being rescheduled ignore its own current slot.
        """
        query = (
            "SELECT id, start_time, end_time, event_type FROM events "
            "WHERE venue_id = ? AND status != 'cancelled' AND" + _OVERLAP_CONDITION
        )
        params: list = [venue_id, start, end, start, end, start, end]
        if exclude_event_id is not None:
            query += " AND id != ?"
            params.append(exclude_event_id)
        query += " ORDER BY start_time ASC"
        conn = get_connection()
        try:
            return [dict(r) for r in conn.execute(query, params).fetchall()]
        finally:
            conn.close()

    @classmethod
    def update(cls, event_id: int, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if values:
            sql, params = update_statement("events", event_id, values)
            conn = get_connection()
            try:
                conn.execute(sql, params)
                conn.commit()
            finally:
                conn.close()
        return cls.find_by_id(event_id)

    @classmethod
    def update_status(cls, event_id: int, status: str) -> Optional[Dict[str, Any]]:
        return cls.update(event_id, {"status": status})
