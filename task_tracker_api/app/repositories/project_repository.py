"""
SQL for the ``projects`` table and the ``project_members`` join table.

Membership has two write paths with different semantics:

* ``add_members`` - union: existing members stay, repeats are ignored.
* ``set_members`` - replace: afterwards the member set is exactly the
  given ids.
"""

import sqlite3
from typing import Any, Dict, Iterable, List, Optional

from ..core.db import NOW_SQL
from . import placeholders, task_repository, unique_ids


PROJECT_COLUMNS = "id, name, description, created_by_id, created_at, updated_at"

WRITABLE_COLUMNS = {"name", "description"}


def create(
    conn: sqlite3.Connection,
    name: str,
    description: Optional[str],
    created_by_id: int,
) -> int:
    cursor = conn.execute(
        "INSERT INTO projects (name, description, created_by_id) VALUES (?, ?, ?)",
        (name, description, created_by_id),
    )
    return cursor.lastrowid


def update(conn: sqlite3.Connection, project_id: int, fields: Dict[str, Any]) -> None:
    """Write the given columns and bump ``updated_at``."""
    assignments = []
    values: List[Any] = []
    for key, value in fields.items():
        if key not in WRITABLE_COLUMNS:
            raise KeyError(f"Unknown project column {key!r}")
        assignments.append(f"{key} = ?")
        values.append(value)
    assignments.append(f"updated_at = {NOW_SQL}")
    values.append(project_id)
    conn.execute(f"UPDATE projects SET {', '.join(assignments)} WHERE id = ?", tuple(values))


def delete(conn: sqlite3.Connection, project_id: int) -> bool:
    """Delete a project.  Returns ``False`` if it did not exist.

    Member links are removed by the ``ON DELETE CASCADE`` rule; the
    project's tasks are kept and their ``project_id`` is set to NULL.
    """
    conn.execute("UPDATE tasks SET project_id = NULL WHERE project_id = ?", (project_id,))
    cursor = conn.execute("DELETE FROM projects WHERE id = ?", (project_id,))
    return cursor.rowcount > 0


def exists(conn: sqlite3.Connection, project_id: int) -> bool:
    return conn.execute("SELECT 1 FROM projects WHERE id = ?", (project_id,)).fetchone() is not None


def add_members(conn: sqlite3.Connection, project_id: int, user_ids: Iterable[int]) -> None:
    conn.executemany(
        "INSERT OR IGNORE INTO project_members (project_id, user_id) VALUES (?, ?)",
        [(project_id, user_id) for user_id in unique_ids(user_ids)],
    )


def set_members(conn: sqlite3.Connection, project_id: int, user_ids: Iterable[int]) -> None:
    conn.execute("DELETE FROM project_members WHERE project_id = ?", (project_id,))
    add_members(conn, project_id, user_ids)


def _members_for(conn: sqlite3.Connection, project_ids: List[int]) -> Dict[int, List[Dict[str, Any]]]:
    result: Dict[int, List[Dict[str, Any]]] = {project_id: [] for project_id in project_ids}
    if not project_ids:
        return result
    rows = conn.execute(
        f"""
        SELECT pm.project_id, u.id, u.name, u.email, u.image
        FROM project_members pm JOIN users u ON u.id = pm.user_id
        WHERE pm.project_id IN ({placeholders(project_ids)})
        ORDER BY u.name IS NULL, u.name COLLATE NOCASE ASC, u.id ASC
        """,
        tuple(project_ids),
    ).fetchall()
    for row in rows:
        member = dict(row)
        result[member.pop("project_id")].append(member)
    return result


def find_by_id(
    conn: sqlite3.Connection,
    project_id: int,
    *,
    include_members: bool = False,
    include_tasks: bool = False,
    include_task_details: bool = False,
) -> Optional[Dict[str, Any]]:
    """Fetch one project.

    ``include_task_details`` loads the tasks with their tags and comments
    attached; ``include_tasks`` alone loads plain task rows.
    """
    row = conn.execute(
        f"SELECT {PROJECT_COLUMNS} FROM projects WHERE id = ?", (project_id,)
    ).fetchone()
    if not row:
        return None
    project = dict(row)
    if include_members:
        project["members"] = _members_for(conn, [project_id])[project_id]
    if include_tasks or include_task_details:
        project["tasks"] = task_repository.find_many(
            conn,
            project_id=project_id,
            include_tags=include_task_details,
            include_comments=include_task_details,
        )
    return project


def find_all(
    conn: sqlite3.Connection,
    *,
    include_members: bool = False,
    include_tasks: bool = False,
) -> List[Dict[str, Any]]:
    projects = [
        dict(row)
        for row in conn.execute(
            f"SELECT {PROJECT_COLUMNS} FROM projects ORDER BY created_at DESC, id DESC"
        ).fetchall()
    ]
    project_ids = [project["id"] for project in projects]
    if include_members:
        members = _members_for(conn, project_ids)
        for project in projects:
            project["members"] = members[project["id"]]
    if include_tasks:
        by_project: Dict[int, List[Dict[str, Any]]] = {project_id: [] for project_id in project_ids}
        if project_ids:
            rows = conn.execute(
                f"""
                SELECT {task_repository.TASK_COLUMNS} FROM tasks
                WHERE project_id IN ({placeholders(project_ids)})
                {task_repository.NEWEST_FIRST}
                """,
                tuple(project_ids),
            ).fetchall()
            for task_row in rows:
                by_project[task_row["project_id"]].append(dict(task_row))
        for project in projects:
            project["tasks"] = by_project[project["id"]]
    return projects
