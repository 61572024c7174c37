"""
Business logic for projects and their membership.

Every method receives the acting identity as ``current_user`` (the
payload returned by ``core.security.get_current_user``) and performs its
work inside a single ``transaction``.  Membership has two write paths:
``add_member`` unions one user into the member set, while ``update``
with ``member_ids`` replaces the whole set.
"""

import logging
from typing import Any, List, Mapping, Optional

from ..core.db import transaction
from ..core.errors import NotFoundError
from ..core.security import require_identity
from ..repositories import project_repository, user_repository
from ..schemas.project import (
    DeleteResult,
    ProjectCreate,
    ProjectDetail,
    ProjectMemberAdd,
    ProjectRead,
    ProjectUpdate,
)


logger = logging.getLogger(__name__)


def _check_users_exist(conn, user_ids: List[int]) -> None:
    missing = user_repository.missing_ids(conn, user_ids)
    if missing:
        raise NotFoundError(f"Users not found: {', '.join(str(i) for i in missing)}")


class ProjectService:
    """Service for creating, reading, updating and deleting projects."""

    @classmethod
    async def create(cls, data: ProjectCreate, current_user: Optional[Mapping[str, Any]]) -> ProjectRead:
        """Create a project owned by the acting user.

        The creator is not added as a member automatically; ``member_ids``
        become the initial member set.  Raises ``NotFoundError`` if any
        member id is unknown, in which case nothing is written.
        """
        user_id = require_identity(current_user)
        logger.info("User %s is creating project '%s'", user_id, data.name)
        with transaction() as conn:
            if data.member_ids:
                _check_users_exist(conn, data.member_ids)
            project_id = project_repository.create(conn, data.name, data.description, user_id)
            if data.member_ids:
                project_repository.add_members(conn, project_id, data.member_ids)
            project = project_repository.find_by_id(
                conn, project_id, include_members=True, include_tasks=True
            )
        return ProjectRead.model_validate(project)

    @classmethod
    async def add_member(
        cls,
        project_id: int,
        data: ProjectMemberAdd,
        current_user: Optional[Mapping[str, Any]],
    ) -> ProjectRead:
        """Invite the user with the given email to a project.

        Adding someone who is already a member leaves the member set
        unchanged.
        """
        user_id = require_identity(current_user)
        with transaction() as conn:
            user = user_repository.find_by_email(conn, data.email)
            if not user:
                raise NotFoundError("User not found")
            if not project_repository.exists(conn, project_id):
                raise NotFoundError(f"Project {project_id} not found")
            project_repository.add_members(conn, project_id, [user["id"]])
            project = project_repository.find_by_id(
                conn, project_id, include_members=True, include_tasks=True
            )
        logger.info("User %s added %s to project %s", user_id, user["email"], project_id)
        return ProjectRead.model_validate(project)

    @classmethod
    async def get_all(cls, current_user: Optional[Mapping[str, Any]]) -> List[ProjectRead]:
        """Return every project with its members and tasks, newest first."""
        require_identity(current_user)
        with transaction() as conn:
            projects = project_repository.find_all(conn, include_members=True, include_tasks=True)
        return [ProjectRead.model_validate(p) for p in projects]

    @classmethod
    async def get_by_id(cls, project_id: int, current_user: Optional[Mapping[str, Any]]) -> ProjectDetail:
        """Return one project; its tasks carry their tags and comments."""
        require_identity(current_user)
        with transaction() as conn:
            project = project_repository.find_by_id(
                conn, project_id, include_members=True, include_task_details=True
            )
        if not project:
            raise NotFoundError("Project not found")
        return ProjectDetail.model_validate(project)

    @classmethod
    async def update(
        cls,
        project_id: int,
        data: ProjectUpdate,
        current_user: Optional[Mapping[str, Any]],
    ) -> ProjectRead:
        """Apply a partial update.

        ``member_ids``, when given, replaces the member set; an empty list
        removes every member.  Other fields left as ``None`` are unchanged.
        """
        user_id = require_identity(current_user)
        updates = data.model_dump(exclude={"member_ids"}, exclude_none=True)
        with transaction() as conn:
            if not project_repository.exists(conn, project_id):
                raise NotFoundError(f"Project {project_id} not found")
            if data.member_ids:
                _check_users_exist(conn, data.member_ids)
            project_repository.update(conn, project_id, updates)
            if data.member_ids is not None:
                project_repository.set_members(conn, project_id, data.member_ids)
            project = project_repository.find_by_id(
                conn, project_id, include_members=True, include_tasks=True
            )
        logger.info("User %s updated project %s", user_id, project_id)
        return ProjectRead.model_validate(project)

    @classmethod
    async def delete(cls, project_id: int, current_user: Optional[Mapping[str, Any]]) -> DeleteResult:
        """Hard-delete a project.  Its tasks are kept without a project."""
        user_id = require_identity(current_user)
        with transaction() as conn:
            if not project_repository.delete(conn, project_id):
                raise NotFoundError(f"Project {project_id} not found")
        logger.info("User %s deleted project %s", user_id, project_id)
        return DeleteResult(success=True, message="Project deleted successfully")
