"""
SQL for the ``tasks`` table.

Lookups return flat task rows; the ``include_*`` flags attach related
records in batches (one query per relation, not per task):

* ``include_people`` - ``created_by`` and ``assigned_to`` user records
* ``include_project`` - the ``project`` record (``None`` for project-less tasks)
* ``include_tags`` - ``tags``, a list of ``{id, name}``
* ``include_comments`` - ``comments``; ``include_comment_authors`` adds each
  comment's ``created_by``
"""

import sqlite3
from typing import Any, Dict, List, Optional

from ..core.db import NOW_SQL
from . import comment_repository, placeholders, tag_repository, unique_ids, user_repository


TASK_COLUMNS = (
    "id, title, description, status, priority, deadline, created_by_id, "
    "assigned_to_id, project_id, created_at, updated_at"
)

# Columns a caller may write through ``create``/``update``.
WRITABLE_COLUMNS = {
    "title",
    "description",
    "status",
    "priority",
    "deadline",
    "assigned_to_id",
    "project_id",
}

# Newest first; id breaks ties between rows created in the same millisecond.
NEWEST_FIRST = "ORDER BY created_at DESC, id DESC"


def create(conn: sqlite3.Connection, created_by_id: int, fields: Dict[str, Any]) -> int:
    """Insert a task and return its id."""
    columns = ["created_by_id"]
    values: List[Any] = [created_by_id]
    for key, value in fields.items():
        if key not in WRITABLE_COLUMNS:
            raise KeyError(f"Unknown task column {key!r}")
        columns.append(key)
        values.append(value)
    cursor = conn.execute(
        f"INSERT INTO tasks ({', '.join(columns)}) VALUES ({placeholders(values)})",
        tuple(values),
    )
    return cursor.lastrowid


def update(conn: sqlite3.Connection, task_id: int, fields: Dict[str, Any]) -> None:
    """Write the given columns and bump ``updated_at``."""
    assignments = []
    values: List[Any] = []
    for key, value in fields.items():
        if key not in WRITABLE_COLUMNS:
            raise KeyError(f"Unknown task column {key!r}")
        assignments.append(f"{key} = ?")
        values.append(value)
    assignments.append(f"updated_at = {NOW_SQL}")
    values.append(task_id)
    conn.execute(f"UPDATE tasks SET {', '.join(assignments)} WHERE id = ?", tuple(values))


def delete(conn: sqlite3.Connection, task_id: int) -> bool:
    """Delete a task; tag links and comments go with it.  Returns ``False`` if absent."""
    cursor = conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
    return cursor.rowcount > 0


def exists(conn: sqlite3.Connection, task_id: int) -> bool:
    return conn.execute("SELECT 1 FROM tasks WHERE id = ?", (task_id,)).fetchone() is not None


def find_by_id(
    conn: sqlite3.Connection,
    task_id: int,
    *,
    include_people: bool = False,
    include_project: bool = False,
    include_tags: bool = False,
    include_comments: bool = False,
    include_comment_authors: bool = False,
) -> Optional[Dict[str, Any]]:
    row = conn.execute(f"SELECT {TASK_COLUMNS} FROM tasks WHERE id = ?", (task_id,)).fetchone()
    if not row:
        return None
    tasks = [dict(row)]
    _attach(
        conn,
        tasks,
        include_people=include_people,
        include_project=include_project,
        include_tags=include_tags,
        include_comments=include_comments,
        include_comment_authors=include_comment_authors,
    )
    return tasks[0]


def find_many(
    conn: sqlite3.Connection,
    *,
    created_by_id: Optional[int] = None,
    assigned_to_id: Optional[int] = None,
    project_id: Optional[int] = None,
    involving_user_id: Optional[int] = None,
    skip: int = 0,
    take: Optional[int] = None,
    include_people: bool = False,
    include_project: bool = False,
    include_tags: bool = False,
    include_comments: bool = False,
    include_comment_authors: bool = False,
) -> List[Dict[str, Any]]:
    """Return tasks matching every given filter, newest first.

    ``involving_user_id`` matches tasks the user either created or is
    assigned to.  ``skip``/``take`` apply offset pagination after
    ordering; ``take=None`` returns everything from ``skip`` on.
    """
    where_clauses: List[str] = []
    params: List[Any] = []
    if created_by_id is not None:
        where_clauses.append("created_by_id = ?")
        params.append(created_by_id)
    if assigned_to_id is not None:
        where_clauses.append("assigned_to_id = ?")
        params.append(assigned_to_id)
    if project_id is not None:
        where_clauses.append("project_id = ?")
        params.append(project_id)
    if involving_user_id is not None:
        where_clauses.append("(created_by_id = ? OR assigned_to_id = ?)")
        params.extend([involving_user_id, involving_user_id])
    query = f"SELECT {TASK_COLUMNS} FROM tasks"
    if where_clauses:
        query += " WHERE " + " AND ".join(where_clauses)
    query += f" {NEWEST_FIRST}"
    # SQLite treats a negative LIMIT as "no limit"
    query += " LIMIT ? OFFSET ?"
    params.extend([take if take is not None else -1, skip])
    tasks = [dict(row) for row in conn.execute(query, tuple(params)).fetchall()]
    _attach(
        conn,
        tasks,
        include_people=include_people,
        include_project=include_project,
        include_tags=include_tags,
        include_comments=include_comments,
        include_comment_authors=include_comment_authors,
    )
    return tasks


def _attach(
    conn: sqlite3.Connection,
    tasks: List[Dict[str, Any]],
    *,
    include_people: bool,
    include_project: bool,
    include_tags: bool,
    include_comments: bool,
    include_comment_authors: bool,
) -> None:
    if not tasks:
        return
    task_ids = [task["id"] for task in tasks]
    if include_people:
        people = user_repository.find_many_by_ids(
            conn,
            [t["created_by_id"] for t in tasks]
            + [t["assigned_to_id"] for t in tasks if t["assigned_to_id"] is not None],
        )
        for task in tasks:
            task["created_by"] = people.get(task["created_by_id"])
            task["assigned_to"] = people.get(task["assigned_to_id"])
    if include_project:
        project_ids = unique_ids(t["project_id"] for t in tasks if t["project_id"] is not None)
        projects: Dict[int, Dict[str, Any]] = {}
        if project_ids:
            rows = conn.execute(
                f"SELECT id, name, description, created_by_id FROM projects WHERE id IN ({placeholders(project_ids)})",
                tuple(project_ids),
            ).fetchall()
            projects = {row["id"]: dict(row) for row in rows}
        for task in tasks:
            task["project"] = projects.get(task["project_id"])
    if include_tags:
        tags = tag_repository.find_for_tasks(conn, task_ids)
        for task in tasks:
            task["tags"] = tags[task["id"]]
    if include_comments or include_comment_authors:
        comments = comment_repository.find_for_tasks(conn, task_ids, include_author=include_comment_authors)
        for task in tasks:
            task["comments"] = comments[task["id"]]
