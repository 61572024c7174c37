"""
Pydantic models for tasks, tags and comments.

``TaskCreate`` and ``TaskUpdate`` are the input schemas.  Every field of
``TaskUpdate`` is optional and ``None`` means "leave unchanged".  Note
the asymmetry with projects: ``tag_ids`` on a task update *adds* tag
links, whereas ``member_ids`` on a project update *replaces* the
member set (see ``schemas.project``).

``TaskSummary`` is the flat row; ``TaskRead`` adds the related records
the listing endpoints attach (creator, assignee, project, tags and
comments).
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from ..core.config import settings


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class TaskCreate(BaseModel):
    """Schema for creating a task.

    ``assigned_to_id``, ``project_id`` and ``tag_ids`` are only linked when
    supplied; a task may exist without a project.
    """

    title: str = Field(..., min_length=1, examples=["Write spec"])
    description: Optional[str] = Field(None, examples=["First draft of the API contract"])
    priority: TaskPriority = Field(TaskPriority.MEDIUM, examples=["HIGH"])
    status: TaskStatus = Field(TaskStatus.TODO, examples=["TODO"])
    deadline: Optional[datetime] = Field(None, examples=["2026-11-01T17:00:00Z"])
    assigned_to_id: Optional[int] = Field(None, examples=[2])
    tag_ids: Optional[List[int]] = Field(None, examples=[[1, 3]])
    project_id: Optional[int] = Field(None, examples=[1])

    model_config = {
        "str_strip_whitespace": True,
    }


class TaskUpdate(BaseModel):
    """Schema for updating a task.

    All fields are optional; only provided fields will be updated.
    ``tag_ids`` is additive: the given tags are linked in addition to the
    existing ones and an empty list changes nothing.
    """

    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    status: Optional[TaskStatus] = None
    deadline: Optional[datetime] = None
    assigned_to_id: Optional[int] = None
    tag_ids: Optional[List[int]] = None
    project_id: Optional[int] = None

    model_config = {
        "str_strip_whitespace": True,
    }


class TaskPage(BaseModel):
    """Offset pagination window for per-user task listings."""

    skip: int = Field(0, ge=0)
    take: int = Field(settings.default_page_size, ge=1, le=settings.max_page_size)


class TagCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=64, examples=["backend"])

    model_config = {
        "str_strip_whitespace": True,
    }


class TagRead(BaseModel):
    id: int
    name: str

    model_config = {
        "from_attributes": True,
    }


class TaskPerson(BaseModel):
    """Compact user record embedded in task and comment payloads."""

    id: int
    name: Optional[str] = None
    email: str
    image: Optional[str] = None


class CommentCreate(BaseModel):
    text: str = Field(..., min_length=1, examples=["Looks good to me"])

    model_config = {
        "str_strip_whitespace": True,
    }


class CommentRead(BaseModel):
    id: int
    text: str
    task_id: int
    created_by_id: int
    created_at: datetime
    # Only populated where the listing asks for comment authors
    created_by: Optional[TaskPerson] = None

    model_config = {
        "from_attributes": True,
    }


class TaskProject(BaseModel):
    """Project fields embedded in a task payload."""

    id: int
    name: str
    description: Optional[str] = None
    created_by_id: int


class TaskSummary(BaseModel):
    """Schema for a task row without relations."""

    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    deadline: Optional[datetime] = None
    created_by_id: int
    assigned_to_id: Optional[int] = None
    project_id: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }


class TaskRead(TaskSummary):
    """Schema for a task with its related records attached."""

    created_by: Optional[TaskPerson] = None
    assigned_to: Optional[TaskPerson] = None
    project: Optional[TaskProject] = None
    tags: List[TagRead] = []
    comments: List[CommentRead] = []
