"""SQL for the ``tags`` table and the ``task_tags`` join table."""

import sqlite3
from typing import Any, Dict, Iterable, List, Optional

from . import placeholders, unique_ids


def find_all(conn: sqlite3.Connection) -> List[Dict[str, Any]]:
    rows = conn.execute("SELECT id, name FROM tags ORDER BY name COLLATE NOCASE ASC").fetchall()
    return [dict(row) for row in rows]


def find_by_name(conn: sqlite3.Connection, name: str) -> Optional[Dict[str, Any]]:
    row = conn.execute("SELECT id, name FROM tags WHERE name = ?", (name,)).fetchone()
    return dict(row) if row else None


def create(conn: sqlite3.Connection, name: str) -> Dict[str, Any]:
    cursor = conn.execute("INSERT INTO tags (name) VALUES (?)", (name,))
    return {"id": cursor.lastrowid, "name": name}


def missing_ids(conn: sqlite3.Connection, tag_ids: Iterable[int]) -> List[int]:
    """Return the subset of ``tag_ids`` that has no matching row."""
    ids = unique_ids(tag_ids)
    if not ids:
        return []
    rows = conn.execute(
        f"SELECT id FROM tags WHERE id IN ({placeholders(ids)})", tuple(ids)
    ).fetchall()
    found = {row["id"] for row in rows}
    return [tag_id for tag_id in ids if tag_id not in found]


def link(conn: sqlite3.Connection, task_id: int, tag_ids: Iterable[int]) -> None:
    """Attach tags to a task, keeping any links it already has.

    The composite primary key on ``task_tags`` turns a repeated link into
    a no-op rather than a duplicate row.
    """
    conn.executemany(
        "INSERT OR IGNORE INTO task_tags (task_id, tag_id) VALUES (?, ?)",
        [(task_id, tag_id) for tag_id in unique_ids(tag_ids)],
    )


def find_for_tasks(conn: sqlite3.Connection, task_ids: Iterable[int]) -> Dict[int, List[Dict[str, Any]]]:
    """Return the tags of each task keyed by task id."""
    ids = unique_ids(task_ids)
    result: Dict[int, List[Dict[str, Any]]] = {task_id: [] for task_id in ids}
    if not ids:
        return result
    rows = conn.execute(
        f"""
        SELECT tt.task_id, t.id, t.name
        FROM task_tags tt JOIN tags t ON t.id = tt.tag_id
        WHERE tt.task_id IN ({placeholders(ids)})
        ORDER BY t.name COLLATE NOCASE ASC
        """,
        tuple(ids),
    ).fetchall()
    for row in rows:
        result[row["task_id"]].append({"id": row["id"], "name": row["name"]})
    return result
