"""
Business logic for tasks.

Tasks are created by the acting user and may optionally be assigned to
another user, filed under a project and tagged.  Status moves freely
between ``TODO``, ``IN_PROGRESS`` and ``DONE``; there is no enforced
transition graph and a ``DONE`` task can be reopened.

Updates are partial: fields left as ``None`` keep their value.  The
assignee and the project are only re-pointed when an id is supplied, and
``tag_ids`` adds links without removing existing ones.

Whenever a task is assigned to somebody other than the acting user, a
notification is written for the assignee in the same transaction.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..core.config import settings
from ..core.db import transaction
from ..core.errors import NotFoundError
from ..core.security import require_identity
from ..repositories import (
    comment_repository,
    notification_repository,
    project_repository,
    tag_repository,
    task_repository,
    user_repository,
)
from ..schemas.project import DeleteResult
from ..schemas.task import (
    CommentCreate,
    CommentRead,
    TaskCreate,
    TaskPage,
    TaskRead,
    TaskUpdate,
)


logger = logging.getLogger(__name__)

# Relations attached to every task returned by the listing operations.
FULL_INCLUDE: Dict[str, bool] = {
    "include_people": True,
    "include_project": True,
    "include_tags": True,
    "include_comments": True,
}


def _check_references(
    conn,
    assigned_to_id: Optional[int] = None,
    project_id: Optional[int] = None,
    tag_ids: Optional[List[int]] = None,
) -> None:
    """Raise ``NotFoundError`` if any referenced id does not resolve."""
    if assigned_to_id is not None and not user_repository.find_by_id(conn, assigned_to_id):
        raise NotFoundError(f"User {assigned_to_id} not found")
    if project_id is not None and not project_repository.exists(conn, project_id):
        raise NotFoundError(f"Project {project_id} not found")
    if tag_ids:
        missing = tag_repository.missing_ids(conn, tag_ids)
        if missing:
            raise NotFoundError(f"Tags not found: {', '.join(str(i) for i in missing)}")


def _notify_assignee(conn, assignee_id: Optional[int], actor_id: int, title: str) -> None:
    if assignee_id is None or assignee_id == actor_id:
        return
    notification_repository.create(conn, assignee_id, f"You have been assigned to task '{title}'")


class TaskService:
    """Service for creating, listing, updating and deleting tasks."""

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    @classmethod
    async def create(cls, data: TaskCreate, current_user: Optional[Mapping[str, Any]]) -> TaskRead:
        """Create a task owned by the acting user.

        Assignee, project and tags are linked only when their ids are
        supplied.  Unknown ids raise ``NotFoundError`` and nothing is
        written.
        """
        user_id = require_identity(current_user)
        logger.info("User %s is creating task '%s'", user_id, data.title)
        fields = data.model_dump(mode="json", exclude={"tag_ids"}, exclude_none=True)
        with transaction() as conn:
            _check_references(conn, data.assigned_to_id, data.project_id, data.tag_ids)
            task_id = task_repository.create(conn, user_id, fields)
            if data.tag_ids:
                tag_repository.link(conn, task_id, data.tag_ids)
            _notify_assignee(conn, data.assigned_to_id, user_id, data.title)
            task = task_repository.find_by_id(conn, task_id, **FULL_INCLUDE)
        return TaskRead.model_validate(task)

    @classmethod
    async def update(
        cls,
        task_id: int,
        data: TaskUpdate,
        current_user: Optional[Mapping[str, Any]],
    ) -> TaskRead:
        """Apply a partial update to a task.

        ``tag_ids`` adds links; an empty list leaves the existing tags
        untouched.  Raises ``NotFoundError`` for an unknown task or an
        unknown referenced id.
        """
        user_id = require_identity(current_user)
        fields = data.model_dump(mode="json", exclude={"tag_ids"}, exclude_none=True)
        with transaction() as conn:
            current = task_repository.find_by_id(conn, task_id)
            if not current:
                raise NotFoundError(f"Task {task_id} not found")
            _check_references(conn, data.assigned_to_id, data.project_id, data.tag_ids)
            task_repository.update(conn, task_id, fields)
            if data.tag_ids:
                tag_repository.link(conn, task_id, data.tag_ids)
            if data.assigned_to_id is not None and data.assigned_to_id != current["assigned_to_id"]:
                _notify_assignee(conn, data.assigned_to_id, user_id, data.title or current["title"])
            task = task_repository.find_by_id(conn, task_id, **FULL_INCLUDE)
        logger.info("User %s updated task %s: %s", user_id, task_id, sorted(fields))
        return TaskRead.model_validate(task)

    @classmethod
    async def delete(cls, task_id: int, current_user: Optional[Mapping[str, Any]]) -> DeleteResult:
        """Hard-delete a task together with its tag links and comments."""
        user_id = require_identity(current_user)
        with transaction() as conn:
            if not task_repository.delete(conn, task_id):
                raise NotFoundError(f"Task {task_id} not found")
        logger.info("User %s deleted task %s", user_id, task_id)
        return DeleteResult(success=True, message="Task deleted successfully")

    @classmethod
    async def add_comment(
        cls,
        task_id: int,
        data: CommentCreate,
        current_user: Optional[Mapping[str, Any]],
    ) -> CommentRead:
        """Append a comment authored by the acting user."""
        user_id = require_identity(current_user)
        with transaction() as conn:
            if not task_repository.exists(conn, task_id):
                raise NotFoundError(f"Task {task_id} not found")
            comment = comment_repository.create(conn, task_id, user_id, data.text)
            comment["created_by"] = user_repository.find_by_id(conn, user_id)
        logger.info("User %s commented on task %s", user_id, task_id)
        return CommentRead.model_validate(comment)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @classmethod
    async def get_all(cls, current_user: Optional[Mapping[str, Any]]) -> List[TaskRead]:
        """Return the tasks the acting user created or is assigned to, newest first."""
        user_id = require_identity(current_user)
        with transaction() as conn:
            tasks = task_repository.find_many(conn, involving_user_id=user_id, **FULL_INCLUDE)
        return [TaskRead.model_validate(t) for t in tasks]

    @classmethod
    async def get_by_id(cls, task_id: int, current_user: Optional[Mapping[str, Any]]) -> TaskRead:
        require_identity(current_user)
        with transaction() as conn:
            task = task_repository.find_by_id(conn, task_id, include_comment_authors=True, **FULL_INCLUDE)
        if not task:
            raise NotFoundError("Task not found")
        return TaskRead.model_validate(task)

    @classmethod
    async def get_assigned_to_user(
        cls,
        user_id: int,
        current_user: Optional[Mapping[str, Any]],
        skip: int = 0,
        take: int = settings.default_page_size,
    ) -> List[TaskRead]:
        """Return one page of the tasks assigned to ``user_id``, newest first."""
        require_identity(current_user)
        page = TaskPage(skip=skip, take=take)
        with transaction() as conn:
            tasks = task_repository.find_many(
                conn, assigned_to_id=user_id, skip=page.skip, take=page.take, **FULL_INCLUDE
            )
        return [TaskRead.model_validate(t) for t in tasks]

    @classmethod
    async def get_reported_by_user(
        cls,
        user_id: int,
        current_user: Optional[Mapping[str, Any]],
        skip: int = 0,
        take: int = settings.default_page_size,
    ) -> List[TaskRead]:
        """Return one page of the tasks created by ``user_id``, newest first."""
        require_identity(current_user)
        page = TaskPage(skip=skip, take=take)
        with transaction() as conn:
            tasks = task_repository.find_many(
                conn, created_by_id=user_id, skip=page.skip, take=page.take, **FULL_INCLUDE
            )
        return [TaskRead.model_validate(t) for t in tasks]

    @classmethod
    async def get_by_project_id(cls, project_id: int, current_user: Optional[Mapping[str, Any]]) -> List[TaskRead]:
        """Return every task filed under a project, newest first.

        Comments carry their authors.  An unknown project yields an empty
        list.
        """
        require_identity(current_user)
        with transaction() as conn:
            tasks = task_repository.find_many(
                conn, project_id=project_id, include_comment_authors=True, **FULL_INCLUDE
            )
        return [TaskRead.model_validate(t) for t in tasks]
