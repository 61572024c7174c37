"""Business logic for tags."""

import logging
from typing import Any, List, Mapping, Optional

from ..core.db import transaction
from ..core.security import require_identity
from ..repositories import tag_repository
from ..schemas.task import TagCreate, TagRead


logger = logging.getLogger(__name__)


class TagService:
    """Service for the shared tag vocabulary."""

    @classmethod
    async def create(cls, data: TagCreate, current_user: Optional[Mapping[str, Any]]) -> TagRead:
        """Create a tag, or return the existing one with the same name."""
        user_id = require_identity(current_user)
        with transaction() as conn:
            tag = tag_repository.find_by_name(conn, data.name)
            if tag is None:
                tag = tag_repository.create(conn, data.name)
                logger.info("User %s created tag '%s'", user_id, data.name)
        return TagRead.model_validate(tag)

    @classmethod
    async def get_all(cls, current_user: Optional[Mapping[str, Any]]) -> List[TagRead]:
        require_identity(current_user)
        with transaction() as conn:
            tags = tag_repository.find_all(conn)
        return [TagRead.model_validate(tag) for tag in tags]
