from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from champions.core.core import Service
from champions.core.modules.access.models import Actor
from champions.core.modules.access.permissions import can_delete_forum_item
from champions.core.modules.comment.models import Comment, CommentNode
from champions.core.modules.comment.tree import build_comment_tree
from champions.errors import AccessDeniedError, NotFoundError

logger = structlog.get_logger(__name__)


class CommentService(Service):
    """Manages replies in forum threads."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("comments")

    async def on_start(self) -> None:
        await self._collection.create_index([("post_id", 1), ("created_at", 1)])

    async def get_comment(self, post_id: UUID, comment_id: UUID) -> Comment:
        doc = await self._collection.find_one({"_id": comment_id, "post_id": post_id})
        if doc is None:
            raise NotFoundError("Reply not found")
        return Comment.model_validate(doc)

    async def create_comment(self, actor: Actor, post_id: UUID, content: str, parent_id: UUID | None = None) -> Comment:
        """Add a reply, bump the post counter, and notify the people being replied to."""
        post = await self.core.services.post.get_post(post_id)
        parent = None
        if parent_id is not None:
            doc = await self._collection.find_one({"_id": parent_id, "post_id": post_id})
            if doc is None:
                raise NotFoundError("Parent reply not found")
            parent = Comment.model_validate(doc)

        comment = Comment(
            post_id=post_id,
            parent_id=parent_id,
            author_id=actor.id,
            author_name=actor.name,
            content=content,
        )
        await self._collection.insert_one(comment.to_mongo())
        await self.core.services.post.record_comment_added(post_id)
        logger.info("reply_created", comment_id=comment.id, post_id=post_id, author_id=actor.id)

        self.core.services.notification.notify_reply(post, comment, parent)
        return comment

    async def list_comments(self, post_id: UUID) -> list[Comment]:
        """All replies in a thread, oldest first."""
        cursor = self._collection.find({"post_id": post_id}).sort("created_at", 1)
        return await Comment.list_cursor(cursor)

    async def get_thread(self, post_id: UUID) -> list[CommentNode]:
        """Replies of a post nested by parent, oldest first at every level."""
        await self.core.services.post.get_post(post_id)
        return build_comment_tree(await self.list_comments(post_id))

    async def delete_comment(self, actor: Actor, post_id: UUID, comment_id: UUID) -> None:
        """Delete a reply. Replies to it are not cascaded and render as top-level replies."""
        comment = await self.get_comment(post_id, comment_id)
        if not can_delete_forum_item(actor, comment.author_id):
            raise AccessDeniedError("Not authorized to delete this reply")

        await self._collection.delete_one({"_id": comment_id})
        await self.core.services.post.record_comment_removed(post_id)
        logger.info("reply_deleted", comment_id=comment_id, post_id=post_id, actor_id=actor.id)
