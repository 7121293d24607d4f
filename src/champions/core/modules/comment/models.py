from datetime import datetime
from uuid import UUID

from pydantic import Field

from champions.core.db import MongoModel
from champions.utils import now


class Comment(MongoModel):
    """Reply in a forum thread. `parent_id=None` is a top-level reply."""

    post_id: UUID
    parent_id: UUID | None = None
    author_id: UUID
    author_name: str
    content: str
    created_at: datetime = Field(default_factory=now)


class CommentNode(Comment):
    """Comment with its replies attached, built for display and never stored."""

    children: list["CommentNode"] = Field(default_factory=list)
