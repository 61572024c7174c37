"""
Business logic for the user directory.

The directory is read-only: users are created by the external identity
provider.  Lookups return the compact ``UserRead`` record; the
single-user lookups additionally attach the user's created and assigned
tasks and their notifications.
"""

from typing import Any, Dict, List, Mapping, Optional

from ..core.db import transaction
from ..core.errors import NotFoundError
from ..core.security import require_identity
from ..repositories import notification_repository, task_repository, user_repository
from ..schemas.user import UserDetail, UserRead, UserSearch


def _load_detail(conn, user_id: int) -> Optional[Dict[str, Any]]:
    user = user_repository.find_by_id(conn, user_id)
    if not user:
        return None
    user["created_tasks"] = task_repository.find_many(conn, created_by_id=user_id)
    user["assigned_tasks"] = task_repository.find_many(conn, assigned_to_id=user_id)
    user["notifications"] = notification_repository.find_for_user(conn, user_id)
    return user


class UserService:
    """Read-only lookups over users."""

    @classmethod
    async def get_all(cls, current_user: Optional[Mapping[str, Any]]) -> List[UserRead]:
        """Return every user ordered by name."""
        require_identity(current_user)
        with transaction() as conn:
            rows = user_repository.find_all(conn)
        return [UserRead.model_validate(row) for row in rows]

    @classmethod
    async def get_by_id(cls, user_id: int, current_user: Optional[Mapping[str, Any]]) -> UserDetail:
        require_identity(current_user)
        with transaction() as conn:
            user = _load_detail(conn, user_id)
        if not user:
            raise NotFoundError("User not found")
        return UserDetail.model_validate(user)

    @classmethod
    async def get_current_user(cls, current_user: Optional[Mapping[str, Any]]) -> UserDetail:
        """Return the acting user's own record."""
        user_id = require_identity(current_user)
        with transaction() as conn:
            user = _load_detail(conn, user_id)
        if not user:
            raise NotFoundError("User not found")
        return UserDetail.model_validate(user)

    @classmethod
    async def search(cls, query: str, current_user: Optional[Mapping[str, Any]]) -> List[UserRead]:
        """Case-insensitive substring search on name and email."""
        require_identity(current_user)
        params = UserSearch(query=query)
        with transaction() as conn:
            rows = user_repository.search(conn, params.query)
        return [UserRead.model_validate(row) for row in rows]
