from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path
from uuid import UUID

from champions.config import Config
from champions.core.core import Core
from champions.core.modules.access.permissions import visible_access_levels
from champions.core.modules.comment.models import Comment, CommentNode
from champions.core.modules.event.models import EventPayload, EventUpdate, ScreeningEvent
from champions.core.modules.notification.models import Notification
from champions.core.modules.post.models import Post
from champions.core.modules.resource.models import AccessLevel, Breadcrumb, FolderListing, ResourceFileInfo, ResourceItem
from champions.core.modules.screening.models import ScreeningAttachment, ScreeningLog, ScreeningResult
from champions.core.modules.session.models import AuthToken
from champions.core.modules.user.models import ProfileUpdate, Role, UserView
from champions.core.pagination import PaginationResult
from champions.errors import AuthenticationError, ValidationError
from champions.utils import package_version


class App:
    """Facade for all application operations: authenticates the caller, then delegates to Core."""

    def __init__(self, config: Config) -> None:
        self._core = Core(config)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    # === Auth ===
    async def is_auth_token_valid(self, auth_token: AuthToken) -> bool:
        return await self._core.services.session.is_auth_token_valid(auth_token)

    async def register(self, email: str, password: str, display_name: str | None) -> AuthToken:
        """Create a volunteer account and sign it in."""
        user = await self._core.services.user.create_user(email, password, display_name)
        return await self._core.services.session.create_session(user.id)

    async def login(self, email: str, password: str) -> AuthToken:
        """Authenticate user and create session."""
        if not self._core.services.user.verify_password(email, password):
            raise AuthenticationError("Invalid email or password")
        user = self._core.services.user.get_user_by_email(email)
        return await self._core.services.session.create_session(user.id)

    async def logout(self, auth_token: AuthToken) -> None:
        await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.session.invalidate_session(auth_token)

    # === Profile ===
    async def get_current_user(self, auth_token: AuthToken) -> UserView:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        return UserView.from_domain(self._core.services.user.get_user(actor.id))

    async def update_profile(self, auth_token: AuthToken, update: ProfileUpdate) -> UserView:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        user = await self._core.services.user.update_profile(actor.id, update)
        return UserView.from_domain(user)

    async def change_password(self, auth_token: AuthToken, old_password: str, new_password: str) -> None:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.user.change_password(actor.id, old_password, new_password)

    async def upload_profile_photo(self, auth_token: AuthToken, content: bytes, mime_type: str) -> UserView:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        user = await self._core.services.user.upload_profile_photo(actor.id, content, mime_type)
        return UserView.from_domain(user)

    async def get_user_photo_path(self, auth_token: AuthToken, user_id: UUID) -> Path:
        """Profile photos are visible to any signed-in user."""
        await self._core.services.access.ensure_authenticated(auth_token)
        storage_path = self._core.services.user.get_photo_storage_path(user_id)
        return self._core.services.storage.get_path(storage_path)

    # === User management (admin only) ===
    async def list_users(self, auth_token: AuthToken, limit: int = 100, offset: int = 0) -> PaginationResult[UserView]:
        await self._core.services.access.ensure_admin(auth_token)
        page = await self._core.services.user.list_users(limit, offset)
        return PaginationResult(
            items=[UserView.from_domain(user) for user in page.items], total=page.total, limit=limit, offset=offset
        )

    async def set_user_role(self, auth_token: AuthToken, user_id: UUID, role: Role) -> UserView:
        """Change a user's profile role and refresh the role claim of their sessions."""
        actor = await self._core.services.access.ensure_admin(auth_token)
        if user_id == actor.id and role != Role.ADMIN:
            raise ValidationError("Cannot remove your own admin role")
        user = await self._core.services.user.set_role(user_id, role)
        await self._core.services.session.refresh_claims(user_id)
        return UserView.from_domain(user)

    async def set_advisory_board_status(self, auth_token: AuthToken, user_id: UUID, status: bool) -> UserView:
        await self._core.services.access.ensure_admin(auth_token)
        user = await self._core.services.user.set_advisory_board_status(user_id, status)
        return UserView.from_domain(user)

    async def list_advisory_board_members(self, auth_token: AuthToken) -> list[UserView]:
        """Advisory board roster, visible to any signed-in user."""
        await self._core.services.access.ensure_authenticated(auth_token)
        return [UserView.from_domain(user) for user in self._core.services.user.list_advisory_board_members()]

    # === Forum ===
    async def list_posts(self, auth_token: AuthToken, limit: int = 50, offset: int = 0) -> PaginationResult[Post]:
        await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.post.list_posts(limit, offset)

    async def get_post(self, auth_token: AuthToken, post_id: UUID) -> Post:
        await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.post.get_post(post_id)

    async def create_post(self, auth_token: AuthToken, title: str, content: str) -> Post:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.post.create_post(actor, title, content)

    async def delete_post(self, auth_token: AuthToken, post_id: UUID) -> None:
        """Delete a post (author or moderator)."""
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.post.delete_post(actor, post_id)

    async def get_thread(self, auth_token: AuthToken, post_id: UUID) -> list[CommentNode]:
        await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.comment.get_thread(post_id)

    async def create_comment(self, auth_token: AuthToken, post_id: UUID, content: str, parent_id: UUID | None) -> Comment:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.comment.create_comment(actor, post_id, content, parent_id)

    async def delete_comment(self, auth_token: AuthToken, post_id: UUID, comment_id: UUID) -> None:
        """Delete a reply (author or moderator)."""
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.comment.delete_comment(actor, post_id, comment_id)

    # === Notifications ===
    async def list_notifications(
        self, auth_token: AuthToken, limit: int = 50, offset: int = 0
    ) -> PaginationResult[Notification]:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.notification.list_notifications(actor.id, limit, offset)

    async def count_unread_notifications(self, auth_token: AuthToken) -> int:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.notification.count_unread(actor.id)

    async def mark_notification_read(self, auth_token: AuthToken, notification_id: UUID) -> None:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.notification.mark_read(actor.id, notification_id)

    async def mark_all_notifications_read(self, auth_token: AuthToken) -> int:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.notification.mark_all_read(actor.id)

    # === Resource library ===
    async def browse_resources(self, auth_token: AuthToken, folder_id: UUID | None) -> FolderListing:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.resource.browse(folder_id, actor)

    async def list_resources(self, auth_token: AuthToken, parent_id: UUID | None) -> list[ResourceItem]:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.resource.list_children(parent_id, actor)

    async def get_resource_breadcrumbs(self, auth_token: AuthToken, folder_id: UUID) -> list[Breadcrumb]:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.resource.get_breadcrumbs(folder_id, actor)

    async def create_folder(self, auth_token: AuthToken, name: str, parent_id: UUID | None) -> ResourceItem:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.resource.create_folder(actor, name, parent_id)

    async def rename_resource(self, auth_token: AuthToken, resource_id: UUID, new_name: str) -> ResourceItem:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.resource.rename(actor, resource_id, new_name)

    async def delete_resource(self, auth_token: AuthToken, resource_id: UUID) -> None:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        await self._core.services.resource.delete(actor, resource_id)

    async def upload_resource_file(
        self,
        auth_token: AuthToken,
        content: bytes,
        name: str,
        mime_type: str,
        parent_id: UUID | None,
        access_level: AccessLevel | None,
    ) -> ResourceItem:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.resource.upload_file(actor, content, name, mime_type, parent_id, access_level)

    async def get_resource_file(self, auth_token: AuthToken, resource_id: UUID) -> tuple[Path, ResourceFileInfo]:
        """Resolve a viewable file to its blob on disk."""
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        info = await self._core.services.resource.get_file_info(actor, resource_id)
        return self._core.services.storage.get_path(info.storage_path), info

    # === Screening events ===
    async def list_events(self) -> list[ScreeningEvent]:
        """Public event calendar, no authentication required."""
        return await self._core.services.event.list_events()

    async def create_event(self, auth_token: AuthToken, payload: EventPayload) -> ScreeningEvent:
        actor = await self._core.services.access.ensure_moderator(
            auth_token, "User does not have permission to manage events."
        )
        return await self._core.services.event.create_event(actor, payload)

    async def update_event(self, auth_token: AuthToken, event_id: UUID, update: EventUpdate) -> ScreeningEvent:
        actor = await self._core.services.access.ensure_moderator(
            auth_token, "User does not have permission to manage events."
        )
        return await self._core.services.event.update_event(actor, event_id, update)

    async def delete_event(self, auth_token: AuthToken, event_id: UUID) -> None:
        actor = await self._core.services.access.ensure_moderator(
            auth_token, "User does not have permission to manage events."
        )
        await self._core.services.event.delete_event(actor, event_id)

    async def seed_events(self, auth_token: AuthToken, events: list[tuple[UUID | None, EventPayload]]) -> int:
        actor = await self._core.services.access.ensure_admin(auth_token, "Only admins can seed data.")
        return await self._core.services.event.seed_events(actor, events)

    # === AI screening ===
    async def analyze_screening(
        self, auth_token: AuthToken, medical_history: str, attachment: ScreeningAttachment | None
    ) -> ScreeningResult:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.screening.analyze(actor, medical_history, attachment)

    async def stream_screening(
        self, auth_token: AuthToken, medical_history: str, attachment: ScreeningAttachment | None
    ) -> AsyncIterator[str]:
        actor = await self._core.services.access.ensure_authenticated(auth_token)
        return await self._core.services.screening.stream(actor, medical_history, attachment)

    async def get_screening_logs(
        self, auth_token: AuthToken, limit: int = 50, offset: int = 0
    ) -> PaginationResult[ScreeningLog]:
        await self._core.services.access.ensure_admin(auth_token)
        return await self._core.services.screening.get_logs(limit, offset)

    # === Metadata ===
    async def get_role_access_levels(self, auth_token: AuthToken) -> dict[Role, list[AccessLevel]]:
        await self._core.services.access.ensure_authenticated(auth_token)
        return {role: visible_access_levels(role) for role in Role}

    async def get_version(self, auth_token: AuthToken) -> dict[str, str]:
        """Package version plus build metadata injected at image build time."""
        await self._core.services.access.ensure_authenticated(auth_token)
        config = self._core.config
        return {
            "version": package_version(),
            "git_commit_hash": config.git_commit_hash,
            "git_commit_date": config.git_commit_date,
            "build_time": config.build_time,
        }
