"""Persistence for catering meals."""

from typing import Any, Dict, List, Optional, Tuple

from ..core.db import get_connection
from .base import build_where, encode_columns, insert_statement, offset_for, row_to_dict, update_statement


MEAL_JSON_FIELDS = ("special_dietary", "beverages", "images")
MEAL_BOOL_FIELDS = ("staff_included", "equipment_included", "is_active", "is_popular")


def _to_meal(row) -> Optional[Dict[str, Any]]:
    return row_to_dict(row, MEAL_JSON_FIELDS, MEAL_BOOL_FIELDS)


class MealRepository:

    @classmethod
    def create(cls, values: Dict[str, Any]) -> Dict[str, Any]:
        sql, params = insert_statement("meals", encode_columns(values, MEAL_JSON_FIELDS, MEAL_BOOL_FIELDS))
        conn = get_connection()
        try:
            cursor = conn.execute(sql, params)
            conn.commit()
            meal_id = cursor.lastrowid
        finally:
            conn.close()
        return cls.find_by_id(meal_id)

    @classmethod
    def find_by_id(cls, meal_id: int) -> Optional[Dict[str, Any]]:
        conn = get_connection()
        try:
            return _to_meal(conn.execute("SELECT * FROM meals WHERE id = ?", (meal_id,)).fetchone())
        finally:
            conn.close()

    @classmethod
    def list(
        cls,
        page: int,
        limit: int,
        meal_type: Optional[str] = None,
        search: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        active_only: bool = False,
    ) -> Tuple[List[Dict[str, Any]], int]:
        clauses: list[str] = []
        params: list = []
        if active_only:
            clauses.append("is_active = 1")
        if meal_type:
            clauses.append("type = ?")
            params.append(meal_type)
        if search:
            clauses.append("(name LIKE ? OR description LIKE ? OR cuisine LIKE ?)")
            like = f"%{search}%"
            params.extend([like, like, like])
        if min_price is not None:
            clauses.append("price_per_person >= ?")
            params.append(min_price)
        if max_price is not None:
            clauses.append("price_per_person <= ?")
            params.append(max_price)
        where = build_where(clauses)
        conn = get_connection()
        try:
            total = conn.execute(f"SELECT COUNT(*) FROM meals{where}", params).fetchone()[0]
            rows = conn.execute(
                f"SELECT * FROM meals{where} ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
                [*params, limit, offset_for(page, limit)],
            ).fetchall()
            return [_to_meal(r) for r in rows], total
        finally:
            conn.close()

    @classmethod
    def update(cls, meal_id: int, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if values:
            sql, params = update_statement(
                "meals", meal_id, encode_columns(values, MEAL_JSON_FIELDS, MEAL_BOOL_FIELDS)
            )
            conn = get_connection()
            try:
                conn.execute(sql, params)
                conn.commit()
            finally:
                conn.close()
        return cls.find_by_id(meal_id)

    @classmethod
    def delete(cls, meal_id: int) -> None:
        """Delete a meal; raises ``sqlite3.IntegrityError`` while events use it."""
        conn = get_connection()
        try:
            conn.execute("DELETE FROM meals WHERE id = ?", (meal_id,))
            conn.commit()
        finally:
            conn.close()

    @classmethod
    def count(cls) -> int:
        conn = get_connection()
        try:
            return conn.execute("SELECT COUNT(*) FROM meals").fetchone()[0]
        finally:
            conn.close()
