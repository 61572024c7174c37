"""SQL for the ``users`` table."""

import sqlite3
from typing import Any, Dict, Iterable, List, Optional

from . import placeholders, unique_ids


USER_COLUMNS = "id, name, email, image"


def find_by_id(conn: sqlite3.Connection, user_id: int) -> Optional[Dict[str, Any]]:
    row = conn.execute(
        f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,)
    ).fetchone()
    return dict(row) if row else None


def find_by_email(conn: sqlite3.Connection, email: str) -> Optional[Dict[str, Any]]:
    """Look a user up by email, ignoring case."""
    row = conn.execute(
        f"SELECT {USER_COLUMNS} FROM users WHERE casefold(email) = casefold(?)", (email,)
    ).fetchone()
    return dict(row) if row else None


def find_many_by_ids(conn: sqlite3.Connection, user_ids: Iterable[int]) -> Dict[int, Dict[str, Any]]:
    """Return the users with the given ids keyed by id."""
    ids = unique_ids(user_ids)
    if not ids:
        return {}
    rows = conn.execute(
        f"SELECT {USER_COLUMNS} FROM users WHERE id IN ({placeholders(ids)})",
        tuple(ids),
    ).fetchall()
    return {row["id"]: dict(row) for row in rows}


def missing_ids(conn: sqlite3.Connection, user_ids: Iterable[int]) -> List[int]:
    """Return the subset of ``user_ids`` that has no matching row."""
    ids = unique_ids(user_ids)
    found = find_many_by_ids(conn, ids)
    return [user_id for user_id in ids if user_id not in found]


def find_all(conn: sqlite3.Connection) -> List[Dict[str, Any]]:
    """Return every user ordered by name (unnamed users last), then id."""
    rows = conn.execute(
        f"SELECT {USER_COLUMNS} FROM users ORDER BY name IS NULL, name COLLATE NOCASE ASC, id ASC"
    ).fetchall()
    return [dict(row) for row in rows]


def search(conn: sqlite3.Connection, query: str) -> List[Dict[str, Any]]:
    """Case-insensitive substring match on name or email.

    Both sides are casefolded, so non-ASCII letters match regardless of
    case.  ``%``, ``_`` and the escape character in ``query`` are
    matched literally.
    """
    escaped = query.casefold().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    pattern = f"%{escaped}%"
    rows = conn.execute(
        f"""
        SELECT {USER_COLUMNS} FROM users
        WHERE casefold(name) LIKE ? ESCAPE '\\' OR casefold(email) LIKE ? ESCAPE '\\'
        ORDER BY name IS NULL, name COLLATE NOCASE ASC, id ASC
        """,
        (pattern, pattern),
    ).fetchall()
    return [dict(row) for row in rows]


def upsert(
    conn: sqlite3.Connection,
    email: str,
    name: Optional[str] = None,
    image: Optional[str] = None,
) -> Dict[str, Any]:
    """Insert a user or refresh the name/image of the one with this email.

    Only the identity provider sync (``register_identity.py``) and test
    fixtures create users; the API never does.
    """
    existing = find_by_email(conn, email)
    if existing:
        conn.execute(
            "UPDATE users SET name = ?, image = ? WHERE id = ?",
            (name, image, existing["id"]),
        )
        user_id = existing["id"]
    else:
        cursor = conn.execute(
            "INSERT INTO users (name, email, image) VALUES (?, ?, ?)",
            (name, email, image),
        )
        user_id = cursor.lastrowid
    return find_by_id(conn, user_id)
