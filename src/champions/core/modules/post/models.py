from datetime import datetime
from uuid import UUID

from pydantic import Field

from champions.core.db import MongoModel
from champions.utils import now


class Post(MongoModel):
    """Discussion thread opened in the volunteer forum."""

    title: str
    content: str
    author_id: UUID
    author_name: str
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)
    like_count: int = 0
    comment_count: int = 0  # Maintained with atomic $inc, never read-modify-write
    last_comment_at: datetime | None = None
