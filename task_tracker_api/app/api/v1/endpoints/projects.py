"""
Project endpoints for API v1.

CRUD over projects plus membership invites.  All routes require an
authenticated user; the resolved identity is passed on to the service
as ``current_user``.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from task_tracker_api.app.core.errors import NotFoundError
from task_tracker_api.app.core.security import get_current_user
from task_tracker_api.app.schemas.project import (
    DeleteResult,
    ProjectCreate,
    ProjectDetail,
    ProjectMemberAdd,
    ProjectRead,
    ProjectUpdate,
)
from task_tracker_api.app.schemas.task import TaskRead
from task_tracker_api.app.services.project_service import ProjectService
from task_tracker_api.app.services.task_service import TaskService


router = APIRouter()


@router.post("/", response_model=ProjectRead, status_code=status.HTTP_201_CREATED)
async def create_project(
    project: ProjectCreate,
    current_user: dict = Depends(get_current_user),
) -> ProjectRead:
    """Create a project owned by the caller.

    ``member_ids`` becomes the initial member set.  The creator is not
    made a member implicitly.
    """
    try:
        return await ProjectService.create(project, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("/", response_model=List[ProjectRead])
async def list_projects(current_user: dict = Depends(get_current_user)) -> List[ProjectRead]:
    """List every project with its members and tasks."""
    return await ProjectService.get_all(current_user)


@router.get("/{project_id}", response_model=ProjectDetail)
async def get_project(
    project_id: int,
    current_user: dict = Depends(get_current_user),
) -> ProjectDetail:
    """Retrieve a project; its tasks include tags and comments."""
    try:
        return await ProjectService.get_by_id(project_id, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{project_id}", response_model=ProjectRead)
async def update_project(
    project_id: int,
    updates: ProjectUpdate,
    current_user: dict = Depends(get_current_user),
) -> ProjectRead:
    """Update a project.

    Partial updates are supported.  Sending ``member_ids`` replaces the
    whole member set; ``[]`` removes everyone.
    """
    try:
        return await ProjectService.update(project_id, updates, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/{project_id}/members", response_model=ProjectRead)
async def add_project_member(
    project_id: int,
    member: ProjectMemberAdd,
    current_user: dict = Depends(get_current_user),
) -> ProjectRead:
    """Invite an existing user by email.  Re-inviting a member is a no-op."""
    try:
        return await ProjectService.add_member(project_id, member, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/{project_id}", response_model=DeleteResult)
async def delete_project(
    project_id: int,
    current_user: dict = Depends(get_current_user),
) -> DeleteResult:
    """Delete a project.  Its tasks are kept and lose their project."""
    try:
        return await ProjectService.delete(project_id, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("/{project_id}/tasks", response_model=List[TaskRead])
async def list_project_tasks(
    project_id: int,
    current_user: dict = Depends(get_current_user),
) -> List[TaskRead]:
    """List the tasks filed under a project, newest first."""
    return await TaskService.get_by_project_id(project_id, current_user)
