import asyncio
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from champions.core.core import Service
from champions.core.modules.comment.models import Comment
from champions.core.modules.notification.models import Notification, NotificationType
from champions.core.modules.post.models import Post
from champions.core.pagination import PaginationResult
from champions.errors import NotFoundError

logger = structlog.get_logger(__name__)


def build_reply_notifications(post: Post, reply: Comment, parent: Comment | None) -> list[Notification]:
    """Inbox entries for a new reply.

    The post author is told unless they wrote the reply. For a threaded reply
    the parent comment author is told too, unless they wrote the reply or are
    the post author (already notified).
    """
    link = f"/forum/post/{post.id}"
    notifications = []
    if post.author_id != reply.author_id:
        notifications.append(
            Notification(
                user_id=post.author_id,
                type=NotificationType.REPLY,
                message=f'{reply.author_name} replied to your topic: "{post.title}"',
                link=link,
                related_id=post.id,
            )
        )
    if parent is not None and parent.author_id not in (reply.author_id, post.author_id):
        notifications.append(
            Notification(
                user_id=parent.author_id,
                type=NotificationType.REPLY,
                message=f'{reply.author_name} replied to your comment in "{post.title}"',
                link=link,
                related_id=post.id,
            )
        )
    return notifications


class NotificationService(Service):
    """Per-user notification inbox, filled in the background."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("notifications")
        self._tasks: set[asyncio.Task[None]] = set()

    async def on_start(self) -> None:
        await self._collection.create_index([("user_id", 1), ("created_at", -1)])

    async def on_stop(self) -> None:
        """Let pending deliveries finish before the database connection closes."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)

    def notify_reply(self, post: Post, reply: Comment, parent: Comment | None) -> None:
        """Schedule reply notifications without blocking the request."""
        notifications = build_reply_notifications(post, reply, parent)
        if not notifications:
            return
        task = asyncio.create_task(self._deliver(notifications, reply.id))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _deliver(self, notifications: list[Notification], comment_id: UUID) -> None:
        try:
            await self._collection.insert_many([notification.to_mongo() for notification in notifications])
        except Exception:
            logger.exception("reply_notifications_failed", comment_id=comment_id)
        else:
            logger.info("reply_notifications_sent", comment_id=comment_id, count=len(notifications))

    async def list_notifications(self, user_id: UUID, limit: int = 50, offset: int = 0) -> PaginationResult[Notification]:
        """Get a user's notifications, newest first."""
        query = {"user_id": user_id}
        total = await self._collection.count_documents(query)
        cursor = self._collection.find(query).sort("created_at", -1).skip(offset).limit(limit)
        items = await Notification.list_cursor(cursor)
        return PaginationResult(items=items, total=total, limit=limit, offset=offset)

    async def count_unread(self, user_id: UUID) -> int:
        return await self._collection.count_documents({"user_id": user_id, "read": False})

    async def mark_read(self, user_id: UUID, notification_id: UUID) -> None:
        result = await self._collection.update_one({"_id": notification_id, "user_id": user_id}, {"$set": {"read": True}})
        if result.matched_count == 0:
            raise NotFoundError("Notification not found")

    async def mark_all_read(self, user_id: UUID) -> int:
        result = await self._collection.update_many({"user_id": user_id, "read": False}, {"$set": {"read": True}})
        return result.modified_count
