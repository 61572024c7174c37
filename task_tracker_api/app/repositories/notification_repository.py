"""SQL for the ``notifications`` table."""

import sqlite3
from typing import Any, Dict, List


def create(conn: sqlite3.Connection, user_id: int, content: str) -> int:
    cursor = conn.execute(
        "INSERT INTO notifications (user_id, content) VALUES (?, ?)",
        (user_id, content),
    )
    return cursor.lastrowid


def find_for_user(conn: sqlite3.Connection, user_id: int) -> List[Dict[str, Any]]:
    rows = conn.execute(
        """
        SELECT id, user_id, content, status, created_at
        FROM notifications WHERE user_id = ?
        ORDER BY created_at DESC, id DESC
        """,
        (user_id,),
    ).fetchall()
    return [dict(row) for row in rows]
