from champions.core.core import Service
from champions.core.modules.access.models import Actor
from champions.core.modules.access.permissions import can_moderate
from champions.core.modules.session.models import AuthToken
from champions.core.modules.user.models import Role
from champions.errors import AccessDeniedError


class AccessService(Service):
    async def ensure_authenticated(self, auth_token: AuthToken) -> Actor:
        """Ensure the user is authenticated and return the caller context."""
        return await self.core.services.session.get_actor(auth_token)

    async def ensure_moderator(self, auth_token: AuthToken, message: str = "Moderator privileges required") -> Actor:
        """Ensure the caller's role claim is admin or moderator."""
        actor = await self.ensure_authenticated(auth_token)
        if not can_moderate(actor.role):
            raise AccessDeniedError(message)
        return actor

    async def ensure_admin(self, auth_token: AuthToken, message: str = "Only admins can perform this action") -> Actor:
        """Ensure the caller's role claim is admin, raise AccessDeniedError if not."""
        actor = await self.ensure_authenticated(auth_token)
        if actor.role != Role.ADMIN:
            raise AccessDeniedError(message)
        return actor
