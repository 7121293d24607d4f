from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import Field

from champions.core.db import MongoModel
from champions.utils import now


class NotificationType(StrEnum):
    REPLY = "reply"
    SYSTEM = "system"


class Notification(MongoModel):
    """Message in a user's notification inbox."""

    user_id: UUID
    type: NotificationType
    message: str
    link: str
    related_id: UUID | None = None
    read: bool = False
    created_at: datetime = Field(default_factory=now)
