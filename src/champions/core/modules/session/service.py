import secrets
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from champions.core.core import Service
from champions.core.modules.access.models import Actor
from champions.core.modules.session.models import AuthToken, Session
from champions.errors import AuthenticationError

logger = structlog.get_logger(__name__)

SESSION_TTL_SECONDS = 30 * 24 * 60 * 60


class SessionService(Service):
    """Issues credentials and resolves them into actors."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("sessions")
        self._actors: dict[AuthToken, Actor] = {}

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("auth_token", 1)], unique=True)
        await self._collection.create_index([("user_id", 1)])
        await self._collection.create_index([("created_at", 1)], expireAfterSeconds=SESSION_TTL_SECONDS)

    async def create_session(self, user_id: UUID) -> AuthToken:
        """Create a session whose role claim is the user's current profile role."""
        user = self.core.services.user.get_user(user_id)
        auth_token = AuthToken(secrets.token_urlsafe(32))
        new_session = Session(user_id=user_id, auth_token=auth_token, role=user.role)
        await self._collection.insert_one(new_session.to_mongo())
        return auth_token

    async def get_actor(self, auth_token: AuthToken) -> Actor:
        """Resolve a token into the caller context. Raises AuthenticationError when invalid."""
        if auth_token in self._actors:
            return self._actors[auth_token]

        doc = await self._collection.find_one({"auth_token": auth_token})
        if doc is None:
            raise AuthenticationError("Invalid or expired session")

        session = Session.model_validate(doc)
        if not self.core.services.user.has_user(session.user_id):
            raise AuthenticationError("Invalid or expired session")

        user = self.core.services.user.get_user(session.user_id)
        actor = Actor(id=user.id, name=user.name, role=session.role)
        self._actors[auth_token] = actor
        return actor

    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        try:
            await self.get_actor(auth_token)
        except AuthenticationError:
            return False
        return True

    async def refresh_claims(self, user_id: UUID) -> int:
        """Copy the profile role into the claim of every session of the user."""
        user = self.core.services.user.get_user(user_id)
        result = await self._collection.update_many({"user_id": user_id}, {"$set": {"role": user.role}})
        self.forget_user(user_id)
        logger.debug("session_claims_refreshed", user_id=user_id, role=user.role, sessions=result.modified_count)
        return result.modified_count

    def forget_user(self, user_id: UUID) -> None:
        """Drop cached actors of a user so the next request sees the current name and role."""
        self._actors = {token: actor for token, actor in self._actors.items() if actor.id != user_id}

    async def invalidate_session(self, auth_token: AuthToken) -> None:
        """Invalidate a session by removing it from the database."""
        self._actors.pop(auth_token, None)
        await self._collection.delete_one({"auth_token": auth_token})
