"""SQL for the ``comments`` table."""

import sqlite3
from typing import Any, Dict, Iterable, List

from . import placeholders, unique_ids, user_repository


COMMENT_COLUMNS = "id, text, task_id, created_by_id, created_at"


def create(conn: sqlite3.Connection, task_id: int, created_by_id: int, text: str) -> Dict[str, Any]:
    cursor = conn.execute(
        "INSERT INTO comments (text, task_id, created_by_id) VALUES (?, ?, ?)",
        (text, task_id, created_by_id),
    )
    row = conn.execute(
        f"SELECT {COMMENT_COLUMNS} FROM comments WHERE id = ?", (cursor.lastrowid,)
    ).fetchone()
    return dict(row)


def find_for_tasks(
    conn: sqlite3.Connection,
    task_ids: Iterable[int],
    include_author: bool = False,
) -> Dict[int, List[Dict[str, Any]]]:
    """Return the comments of each task keyed by task id, oldest first.

    With ``include_author`` each comment also carries its author under
    ``created_by``.
    """
    ids = unique_ids(task_ids)
    result: Dict[int, List[Dict[str, Any]]] = {task_id: [] for task_id in ids}
    if not ids:
        return result
    rows = [
        dict(row)
        for row in conn.execute(
            f"""
            SELECT {COMMENT_COLUMNS} FROM comments
            WHERE task_id IN ({placeholders(ids)})
            ORDER BY created_at ASC, id ASC
            """,
            tuple(ids),
        ).fetchall()
    ]
    if include_author:
        authors = user_repository.find_many_by_ids(conn, (c["created_by_id"] for c in rows))
        for comment in rows:
            comment["created_by"] = authors.get(comment["created_by_id"])
    for comment in rows:
        result[comment["task_id"]].append(comment)
    return result
