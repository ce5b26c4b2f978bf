"""Persistence for payments and per-customer payment history."""

from typing import Any, Dict, List, Optional, Tuple

from ..core.db import get_connection
from .base import build_where, insert_statement, offset_for, update_statement


_HISTORY_SELECT = """
    SELECT p.*,
           e.event_type, e.start_time, e.end_time, e.people_count, e.status AS event_status,
           e.user_id,
           v.id AS venue_id, v.name AS venue_name, v.address AS venue_address,
           m.id AS meal_id, m.name AS meal_name, m.type AS meal_type
    FROM payments p
    JOIN events e ON e.id = p.event_id
    JOIN venues v ON v.id = e.venue_id
    LEFT JOIN meals m ON m.id = e.meal_id
"""


def _to_history_item(row) -> Dict[str, Any]:
    data = dict(row)
    return {
        "id": data["id"],
        "event_id": data["event_id"],
        "amount": data["amount"],
        "method": data["method"],
        "status": data["status"],
        "transaction_id": data["transaction_id"],
        "created_at": data["created_at"],
        "updated_at": data["updated_at"],
        "event": {
            "id": data["event_id"],
            "event_type": data["event_type"],
            "start_time": data["start_time"],
            "end_time": data["end_time"],
            "people_count": data["people_count"],
            "status": data["event_status"],
            "venue": {"id": data["venue_id"], "name": data["venue_name"], "address": data["venue_address"]},
            "meal": (
                {"id": data["meal_id"], "name": data["meal_name"], "type": data["meal_type"]}
                if data["meal_id"] is not None
                else None
            ),
        },
    }


class PaymentRepository:

    @classmethod
    def create(cls, event_id: int, amount: float, method: str, status: str, transaction_id: str) -> Dict[str, Any]:
        sql, params = insert_statement(
            "payments",
            {
                "event_id": event_id,
                "amount": amount,
                "method": method,
                "status": status,
                "transaction_id": transaction_id,
            },
        )
        conn = get_connection()
        try:
            cursor = conn.execute(sql, params)
            conn.commit()
            payment_id = cursor.lastrowid
        finally:
            conn.close()
        return cls.find_by_id(payment_id)

    @classmethod
    def find_by_id(cls, payment_id: int) -> Optional[Dict[str, Any]]:
        """Return the payment together with the owning customer's id."""
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT p.*, e.user_id FROM payments p JOIN events e ON e.id = p.event_id WHERE p.id = ?",
                (payment_id,),
            ).fetchone()
            return dict(row) if row else None
        finally:
            conn.close()

    @classmethod
    def find_by_transaction_id(cls, transaction_id: str) -> Optional[Dict[str, Any]]:
        conn = get_connection()
        try:
            row = conn.execute(
                "SELECT p.*, e.user_id FROM payments p JOIN events e ON e.id = p.event_id "
                "WHERE p.transaction_id = ?",
                (transaction_id,),
            ).fetchone()
            return dict(row) if row else None
        finally:
            conn.close()

    @classmethod
    def update_status(cls, payment_id: int, status: str) -> Optional[Dict[str, Any]]:
        sql, params = update_statement("payments", payment_id, {"status": status})
        conn = get_connection()
        try:
            conn.execute(sql, params)
            conn.commit()
        finally:
            conn.close()
        return cls.find_by_id(payment_id)

    @classmethod
    def list_by_user(
        cls,
        user_id: int,
        page: int,
        limit: int,
        status: Optional[str] = None,
    ) -> Tuple[List[Dict[str, Any]], int]:
        clauses = ["e.user_id = ?"]
        params: list = [user_id]
        if status:
            clauses.append("p.status = ?")
            params.append(status)
        where = build_where(clauses)
        conn = get_connection()
        try:
            total = conn.execute(
                f"SELECT COUNT(*) FROM payments p JOIN events e ON e.id = p.event_id{where}",
                params,
            ).fetchone()[0]
            rows = conn.execute(
                f"{_HISTORY_SELECT}{where} ORDER BY p.created_at DESC, p.id DESC LIMIT ? OFFSET ?",
                [*params, limit, offset_for(page, limit)],
            ).fetchall()
            return [_to_history_item(r) for r in rows], total
        finally:
            conn.close()

    @classmethod
    def summary_by_user(cls, user_id: int) -> Dict[str, Any]:
        """Aggregate a customer's payments regardless of paging filters."""
        conn = get_connection()
        try:
            row = conn.execute(
                """
                SELECT
                    COALESCE(SUM(CASE WHEN p.status = 'success' THEN p.amount ELSE 0 END), 0) AS total_amount,
                    COALESCE(SUM(CASE WHEN p.status = 'success' THEN 1 ELSE 0 END), 0) AS successful_payments,
                    COALESCE(SUM(CASE WHEN p.status = 'failed' THEN 1 ELSE 0 END), 0) AS failed_payments,
                    COALESCE(SUM(CASE WHEN p.status = 'refunded' THEN 1 ELSE 0 END), 0) AS refunded_payments
                FROM payments p
                JOIN events e ON e.id = p.event_id
                WHERE e.user_id = ?
                """,
                (user_id,),
            ).fetchone()
            return dict(row)
        finally:
            conn.close()
