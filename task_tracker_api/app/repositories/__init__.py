"""
Data access layer.

Each module wraps the SQL for one entity (users, projects, tasks, tags,
comments, notifications) behind plain functions that take an open
connection as their first argument.  Services open the connection with
``core.db.transaction`` so that all reads and writes of one operation
share a single commit.  Related records are only loaded when the
caller asks for them through explicit ``include_*`` flags.

Rows are returned as plain dictionaries keyed by column name, ready to
be validated into the read schemas.
"""

from typing import Iterable, List


def placeholders(values: Iterable[object]) -> str:
    """Return ``?, ?, ?`` for an ``IN (...)`` clause over ``values``."""
    return ", ".join("?" for _ in values)


def unique_ids(ids: Iterable[int]) -> List[int]:
    """Deduplicate ids while keeping their first-seen order."""
    seen: dict[int, None] = {}
    for value in ids:
        seen.setdefault(int(value), None)
    return list(seen)
