"""Persistence for venues."""

from typing import Any, Dict, List, Optional, Tuple

from ..core.db import get_connection
from .base import build_where, encode_columns, insert_statement, offset_for, row_to_dict, update_statement


VENUE_JSON_FIELDS = ("facilities", "amenities", "images")
VENUE_BOOL_FIELDS = (
    "catering_allowed",
    "decoration_allowed",
    "alcohol_allowed",
    "smoking_allowed",
    "pet_friendly",
    "is_active",
)


def _to_venue(row) -> Optional[Dict[str, Any]]:
    return row_to_dict(row, VENUE_JSON_FIELDS, VENUE_BOOL_FIELDS)


class VenueRepository:

    @classmethod
    def create(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        sql, params = insert_statement("venues", encode_columns(values, VENUE_JSON_FIELDS, VENUE_BOOL_FIELDS))
        conn = get_connection()
        try:
            cursor = conn.execute(sql, params)
            conn.commit()
            venue_id = cursor.lastrowid
        finally:
            conn.close()
        return cls.find_by_id(venue_id)

    @classmethod
    def find_by_id(cls, venue_id: int) -> Optional[Dict[str, Any]]:
        conn = get_connection()
        try:
            row = conn.execute("SELECT * FROM venues WHERE id = ?", (venue_id,)).fetchone()
            return _to_venue(row)
        finally:
            conn.close()

    @classmethod
    def find_by_name(cls, name: str, exclude_id: Optional[int] = None) -> Optional[Dict[str, Any]]:
        """Case-insensitive lookup used to keep venue names unique."""
        query = "SELECT * FROM venues WHERE LOWER(name) = LOWER(?)"
        params: list = [name]
        if exclude_id is not None:
            query += " AND id != ?"
            params.append(exclude_id)
        conn = get_connection()
        try:
            return _to_venue(conn.execute(query, params).fetchone())
        finally:
            conn.close()

    @classmethod
    def list(
        cls,
        page: int,
        limit: int,
        search: Optional[str] = None,
        min_capacity: Optional[int] = None,
        max_capacity: Optional[int] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        active_only: bool = False,
    ) -> Tuple[List[Dict[str, Any]], int]:
        """Return one page of venues (newest first) and the total match count."""
        clauses: list[str] = []
        params: list = []
        if active_only:
            clauses.append("is_active = 1")
        if search:
            clauses.append("(name LIKE ? OR address LIKE ? OR city LIKE ?)")
            like = f"%{search}%"
            params.extend([like, like, like])
        if min_capacity is not None:
            clauses.append("capacity >= ?")
            params.append(min_capacity)
        if max_capacity is not None:
            clauses.append("capacity <= ?")
            params.append(max_capacity)
        if min_price is not None:
            clauses.append("price_per_day >= ?")
            params.append(min_price)
        if max_price is not None:
            clauses.append("price_per_day <= ?")
            params.append(max_price)
        where = build_where(clauses)
        conn = get_connection()
        try:
            total = conn.execute(f"SELECT COUNT(*) FROM venues{where}", params).fetchone()[0]
            rows = conn.execute(
                f"SELECT * FROM venues{where} ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
                [*params, limit, offset_for(page, limit)],
            ).fetchall()
            return [_to_venue(r) for r in rows], total
        finally:
            conn.close()

    @classmethod
    def update(cls, venue_id: int, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if values:
            sql, params = update_statement(
                "venues", venue_id, encode_columns(values, VENUE_JSON_FIELDS, VENUE_BOOL_FIELDS)
            )
            conn = get_connection()
            try:
                conn.execute(sql, params)
                conn.commit()
            finally:
                conn.close()
        return cls.find_by_id(venue_id)

    @classmethod
    def delete(cls, venue_id: int) -> None:
        """Delete a venue.

        Raises ``sqlite3.IntegrityError`` when events still reference it.
        """
        conn = get_connection()
        try:
            conn.execute("DELETE FROM venues WHERE id = ?", (venue_id,))
            conn.commit()
        finally:
            conn.close()

    @classmethod
    def count(cls) -> int:
        conn = get_connection()
        try:
            return conn.execute("SELECT COUNT(*) FROM venues").fetchone()[0]
        finally:
            conn.close()
