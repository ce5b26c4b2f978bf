"""
Repositories for customer and organizer accounts.

Both account kinds share the same columns and live in separate tables,
so a single implementation is parameterised by table name.
"""

from typing import Any, Dict, Optional

from ..core.db import get_connection
from .base import row_to_dict, update_statement


_PUBLIC_COLUMNS = "id, name, email, phone, created_at"


class AccountRepository:
    table: str = ""

    @classmethod
    def find_by_email(cls, email: str) -> Optional[Dict[str, Any]]:
        """Return the full row (including ``password_hash``) for ``email``."""
        conn = get_connection()
        try:
            row = conn.execute(
                f"SELECT * FROM {cls.table} WHERE email = ?",
                (email.lower(),),
            ).fetchone()
            return row_to_dict(row)
        finally:
            conn.close()

    @classmethod
    def find_by_id(cls, account_id: int, with_password: bool = False) -> Optional[Dict[str, Any]]:
        columns = "*" if with_password else _PUBLIC_COLUMNS
        conn = get_connection()
        try:
            row = conn.execute(
                f"SELECT {columns} FROM {cls.table} WHERE id = ?",
                (account_id,),
            ).fetchone()
            return row_to_dict(row)
        finally:
            conn.close()

    @classmethod
    def create(cls, name: str, email: str, password_hash: str, phone: Optional[str] = None) -> Dict[str, Any]:
        conn = get_connection()
        try:
            cursor = conn.execute(
                f"INSERT INTO {cls.table} (name, email, password_hash, phone) VALUES (?, ?, ?, ?)",
                (name, email.lower(), password_hash, phone),
            )
            conn.commit()
            row = conn.execute(
                f"SELECT {_PUBLIC_COLUMNS} FROM {cls.table} WHERE id = ?",
                (cursor.lastrowid,),
            ).fetchone()
            return row_to_dict(row)
        finally:
            conn.close()

    @classmethod
    def update_profile(cls, account_id: int, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if fields:
            sql, params = update_statement(cls.table, account_id, fields, touch=False)
            conn = get_connection()
            try:
                conn.execute(sql, params)
                conn.commit()
            finally:
                conn.close()
        return cls.find_by_id(account_id)

    @classmethod
    def update_password(cls, account_id: int, password_hash: str) -> None:
        conn = get_connection()
        try:
            conn.execute(
                f"UPDATE {cls.table} SET password_hash = ? WHERE id = ?",
                (password_hash, account_id),
            )
            conn.commit()
        finally:
            conn.close()

    @classmethod
    def count(cls) -> int:
        conn = get_connection()
        try:
            return conn.execute(f"SELECT COUNT(*) FROM {cls.table}").fetchone()[0]
        finally:
            conn.close()


class UserRepository(AccountRepository):
    table = "users"


class OrganizerRepository(AccountRepository):
    table = "organizers"
