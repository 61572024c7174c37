"""
Task endpoints for API v1.

CRUD over tasks, comments, and the per-user listings used by the "my
page" view.  The per-user listings are paginated with ``skip``/``take``
offset parameters; the other listings return everything.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from task_tracker_api.app.core.config import settings
from task_tracker_api.app.core.errors import NotFoundError
from task_tracker_api.app.core.security import get_current_user
from task_tracker_api.app.schemas.project import DeleteResult
from task_tracker_api.app.schemas.task import CommentCreate, CommentRead, TaskCreate, TaskRead, TaskUpdate
from task_tracker_api.app.services.task_service import TaskService


router = APIRouter()


@router.post("/", response_model=TaskRead, status_code=status.HTTP_201_CREATED)
async def create_task(
    task: TaskCreate,
    current_user: dict = Depends(get_current_user),
) -> TaskRead:
    """Create a task.  ``project_id`` is optional."""
    try:
        return await TaskService.create(task, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("/", response_model=List[TaskRead])
async def list_my_tasks(current_user: dict = Depends(get_current_user)) -> List[TaskRead]:
    """List the tasks the caller created or is assigned to, newest first.

    Filtering by status is left to the client.
    """
    return await TaskService.get_all(current_user)


@router.get("/assigned/{user_id}", response_model=List[TaskRead])
async def list_assigned_tasks(
    user_id: int,
    skip: int = Query(0, ge=0, description="Number of tasks to skip"),
    take: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Page size"),
    current_user: dict = Depends(get_current_user),
) -> List[TaskRead]:
    """One page of the tasks assigned to a user."""
    return await TaskService.get_assigned_to_user(user_id, current_user, skip=skip, take=take)


@router.get("/reported/{user_id}", response_model=List[TaskRead])
async def list_reported_tasks(
    user_id: int,
    skip: int = Query(0, ge=0, description="Number of tasks to skip"),
    take: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Page size"),
    current_user: dict = Depends(get_current_user),
) -> List[TaskRead]:
    """One page of the tasks a user created."""
    return await TaskService.get_reported_by_user(user_id, current_user, skip=skip, take=take)


@router.get("/{task_id}", response_model=TaskRead)
async def get_task(
    task_id: int,
    current_user: dict = Depends(get_current_user),
) -> TaskRead:
    try:
        return await TaskService.get_by_id(task_id, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.put("/{task_id}", response_model=TaskRead)
async def update_task(
    task_id: int,
    updates: TaskUpdate,
    current_user: dict = Depends(get_current_user),
) -> TaskRead:
    """Update a task.

    Partial updates are supported; any unspecified fields remain
    unchanged.  ``tag_ids`` adds tags to the ones already attached.
    """
    try:
        return await TaskService.update(task_id, updates, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.delete("/{task_id}", response_model=DeleteResult)
async def delete_task(
    task_id: int,
    current_user: dict = Depends(get_current_user),
) -> DeleteResult:
    try:
        return await TaskService.delete(task_id, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.post("/{task_id}/comments", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
async def add_task_comment(
    task_id: int,
    comment: CommentCreate,
    current_user: dict = Depends(get_current_user),
) -> CommentRead:
    try:
        return await TaskService.add_comment(task_id, comment, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
