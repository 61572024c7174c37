"""Tag endpoints for API v1."""

from typing import List

from fastapi import APIRouter, Depends, status

from task_tracker_api.app.core.security import get_current_user
from task_tracker_api.app.schemas.task import TagCreate, TagRead
from task_tracker_api.app.services.tag_service import TagService


router = APIRouter()


@router.get("/", response_model=List[TagRead])
async def list_tags(current_user: dict = Depends(get_current_user)) -> List[TagRead]:
    return await TagService.get_all(current_user)


@router.post("/", response_model=TagRead, status_code=status.HTTP_201_CREATED)
async def create_tag(
    tag: TagCreate,
    current_user: dict = Depends(get_current_user),
) -> TagRead:
    """Create a tag.  An existing tag with the same name is returned as is."""
    return await TagService.create(tag, current_user)
