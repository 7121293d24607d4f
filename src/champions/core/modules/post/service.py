from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from champions.core.core import Service
from champions.core.modules.access.models import Actor
from champions.core.modules.access.permissions import can_delete_forum_item
from champions.core.modules.post.models import Post
from champions.core.pagination import PaginationResult
from champions.errors import AccessDeniedError, NotFoundError
from champions.utils import now

logger = structlog.get_logger(__name__)


class PostService(Service):
    """Forum posts and their comment counters."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("posts")

    async def on_start(self) -> None:
        await self._collection.create_index([("created_at", -1)])
        await self._collection.create_index([("author_id", 1)])

    async def create_post(self, actor: Actor, title: str, content: str) -> Post:
        post = Post(title=title, content=content, author_id=actor.id, author_name=actor.name)
        await self._collection.insert_one(post.to_mongo())
        logger.info("post_created", post_id=post.id, author_id=actor.id)
        return post

    async def get_post(self, post_id: UUID) -> Post:
        doc = await self._collection.find_one({"_id": post_id})
        if doc is None:
            raise NotFoundError("Post not found")
        return Post.model_validate(doc)

    async def list_posts(self, limit: int = 50, offset: int = 0) -> PaginationResult[Post]:
        """Get paginated posts, newest first."""
        total = await self._collection.count_documents({})
        cursor = self._collection.find({}).sort("created_at", -1).skip(offset).limit(limit)
        items = await Post.list_cursor(cursor)
        return PaginationResult(items=items, total=total, limit=limit, offset=offset)

    async def delete_post(self, actor: Actor, post_id: UUID) -> None:
        """Delete a post. Its comments are left in place, unreachable from the forum."""
        post = await self.get_post(post_id)
        if not can_delete_forum_item(actor, post.author_id):
            raise AccessDeniedError("Not authorized to delete this post")
        await self._collection.delete_one({"_id": post_id})
        logger.info("post_deleted", post_id=post_id, actor_id=actor.id)

    async def record_comment_added(self, post_id: UUID) -> None:
        """Atomically bump the comment counter and activity timestamp."""
        await self._collection.update_one(
            {"_id": post_id}, {"$inc": {"comment_count": 1}, "$set": {"last_comment_at": now()}}
        )

    async def record_comment_removed(self, post_id: UUID) -> None:
        """Atomically decrement the comment counter without going below zero."""
        await self._collection.update_one({"_id": post_id, "comment_count": {"$gt": 0}}, {"$inc": {"comment_count": -1}})
