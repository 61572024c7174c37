"""
Pydantic models for user data.

Users are created by the external identity provider, so there is no
``UserCreate`` schema for the public API.  ``UserRead`` is the compact
directory entry; ``UserDetail`` adds the user's tasks and notifications.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .task import TaskSummary


class UserRead(BaseModel):
    """Schema for a user directory entry."""

    id: int
    name: Optional[str] = Field(None, examples=["Ada Lovelace"])
    email: str = Field(..., examples=["ada@example.com"])
    image: Optional[str] = Field(None, examples=["https://example.com/ada.png"])

    model_config = {
        "from_attributes": True,
    }


class NotificationRead(BaseModel):
    id: int
    user_id: int
    content: str
    status: str
    created_at: datetime

    model_config = {
        "from_attributes": True,
    }


class UserDetail(UserRead):
    """A user together with the tasks they created or were assigned, and their notifications."""

    created_tasks: List[TaskSummary] = []
    assigned_tasks: List[TaskSummary] = []
    notifications: List[NotificationRead] = []


class UserSearch(BaseModel):
    """Query for the case-insensitive name/email search."""

    query: str = Field(..., min_length=1, examples=["ada"])

    model_config = {
        "str_strip_whitespace": True,
    }
