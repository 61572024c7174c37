"""
Pydantic models for projects and membership.

``member_ids`` behaves differently on create and update: on create the
given users are connected as the initial member set, on update the
member set is *replaced* by exactly the given ids (an empty list removes
every member).  Inviting one more user goes through ``ProjectMemberAdd``
instead, which looks the user up by email.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, EmailStr, Field

from .task import TaskRead, TaskSummary
from .user import UserRead


class ProjectCreate(BaseModel):
    """Schema for creating a project."""

    name: str = Field(..., min_length=1, examples=["Alpha"])
    description: Optional[str] = Field(None, examples=["Internal tooling revamp"])
    member_ids: Optional[List[int]] = Field(None, examples=[[2, 3]])

    model_config = {
        "str_strip_whitespace": True,
    }


class ProjectUpdate(BaseModel):
    """Schema for updating a project.

    All fields are optional; only provided fields will be updated.
    """

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    member_ids: Optional[List[int]] = None

    model_config = {
        "str_strip_whitespace": True,
    }


class ProjectMemberAdd(BaseModel):
    """Invite an existing user to a project by email."""

    email: EmailStr = Field(..., examples=["alpha@example.com"])


class ProjectBase(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_by_id: int
    created_at: datetime
    updated_at: datetime

    model_config = {
        "from_attributes": True,
    }


class ProjectRead(ProjectBase):
    """Schema for a project with members and plain task rows."""

    members: List[UserRead] = []
    tasks: List[TaskSummary] = []


class ProjectDetail(ProjectBase):
    """Schema for a single project whose tasks include tags and comments."""

    members: List[UserRead] = []
    tasks: List[TaskRead] = []


class DeleteResult(BaseModel):
    success: bool = True
    message: str
