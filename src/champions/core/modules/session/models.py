"""Session management models."""

from datetime import datetime
from typing import NewType
from uuid import UUID

from pydantic import Field

from champions.core.db import MongoModel
from champions.core.modules.user.models import Role
from champions.utils import now

AuthToken = NewType("AuthToken", str)


class Session(MongoModel):
    """Signed credential issued at login.

    `role` is the claim captured when the session was created or last
    refreshed. Indexed on auth_token - unique, user_id, created_at (TTL 30 days).
    """

    user_id: UUID
    auth_token: str
    role: Role
    created_at: datetime = Field(default_factory=now)
