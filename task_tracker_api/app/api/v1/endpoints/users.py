"""
User directory endpoints for API v1.

Read-only: accounts are managed by the identity provider.  ``/me`` and
``/search`` are declared before ``/{user_id}`` so they are not captured
by the path parameter.
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status

from task_tracker_api.app.core.errors import NotFoundError
from task_tracker_api.app.core.security import get_current_user
from task_tracker_api.app.schemas.user import UserDetail, UserRead
from task_tracker_api.app.services.user_service import UserService


router = APIRouter()


@router.get("/", response_model=List[UserRead])
async def list_users(current_user: dict = Depends(get_current_user)) -> List[UserRead]:
    """List all users ordered by name, e.g. for an assignee picker."""
    return await UserService.get_all(current_user)


@router.get("/me", response_model=UserDetail)
async def get_me(current_user: dict = Depends(get_current_user)) -> UserDetail:
    """Return the caller with their tasks and notifications."""
    try:
        return await UserService.get_current_user(current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e


@router.get("/search", response_model=List[UserRead])
async def search_users(
    query: str = Query(..., min_length=1, description="Substring of the name or email, any case"),
    current_user: dict = Depends(get_current_user),
) -> List[UserRead]:
    return await UserService.search(query, current_user)


@router.get("/{user_id}", response_model=UserDetail)
async def get_user(
    user_id: int,
    current_user: dict = Depends(get_current_user),
) -> UserDetail:
    try:
        return await UserService.get_by_id(user_id, current_user)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
