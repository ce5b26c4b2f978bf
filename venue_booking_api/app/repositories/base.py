"""Shared helpers for the SQLite repositories."""

import json
import sqlite3
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple


def row_to_dict(
    row: Optional[sqlite3.Row],
    json_fields: Iterable[str] = (),
    bool_fields: Iterable[str] = (),
) -> Optional[Dict[str, Any]]:
    """Convert a row to a dict, decoding JSON list columns and 0/1 flags."""
    if row is None:
        return None
    data = dict(row)
    for field in json_fields:
        if field in data:
            data[field] = json.loads(data[field]) if data[field] else []
    for field in bool_fields:
        if field in data and data[field] is not None:
            data[field] = bool(data[field])
    return data


def encode_columns(
    values: Dict[str, Any],
    json_fields: Iterable[str] = (),
    bool_fields: Iterable[str] = (),
) -> Dict[str, Any]:
    """Inverse of ``row_to_dict`` for values about to be written."""
    encoded = dict(values)
    for field in json_fields:
        if field in encoded:
            encoded[field] = json.dumps(encoded[field] or [])
    for field in bool_fields:
        if field in encoded and encoded[field] is not None:
            encoded[field] = int(bool(encoded[field]))
    return encoded


def offset_for(page: int, limit: int) -> int:
    return (page - 1) * limit


def build_where(clauses: Sequence[str]) -> str:
    return " WHERE " + " AND ".join(clauses) if clauses else ""


def insert_statement(table: str, values: Dict[str, Any]) -> Tuple[str, List[Any]]:
    columns = list(values)
    placeholders = ", ".join("?" for _ in columns)
    sql = f"INSERT INTO {table} ({', '.join(columns)}) VALUES ({placeholders})"
    return sql, [values[c] for c in columns]


def update_statement(table: str, row_id: int, values: Dict[str, Any], touch: bool = True) -> Tuple[str, List[Any]]:
    assignments = [f"{column} = ?" for column in values]
    params = list(values.values())
    if touch:
        assignments.append("updated_at = strftime('%Y-%m-%dT%H:%M:%S', 'now')")
    sql = f"UPDATE {table} SET {', '.join(assignments)} WHERE id = ?"
    params.append(row_id)
    return sql, params
