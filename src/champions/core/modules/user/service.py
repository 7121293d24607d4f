from types import MappingProxyType
from typing import Any
from uuid import UUID

import bcrypt
import structlog
from pymongo.asynchronous.database import AsyncDatabase

from champions.core.core import Service
from champions.core.modules.user.models import ProfileUpdate, Role, User
from champions.core.modules.user.validators import normalize_email, validate_password
from champions.core.pagination import PaginationResult
from champions.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)

PHOTO_EXTENSIONS = {"image/jpeg": "jpg", "image/png": "png", "image/gif": "gif", "image/webp": "webp"}


class UserService(Service):
    """Manages user profiles with in-memory cache."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("users")
        self._users: dict[UUID, User] = {}

    def get_user(self, user_id: UUID) -> User:
        """Get user by ID from cache."""
        if user_id not in self._users:
            raise NotFoundError(f"User '{user_id}' not found")
        return self._users[user_id]

    def get_user_by_email(self, email: str) -> User:
        """Get user by email from cache."""
        email = email.strip().lower()
        user = next((u for u in self._users.values() if u.email == email), None)
        if user is None:
            raise NotFoundError(f"User '{email}' not found")
        return user

    def has_user(self, user_id: UUID) -> bool:
        return user_id in self._users

    def has_email(self, email: str) -> bool:
        email = email.strip().lower()
        return any(user.email == email for user in self._users.values())

    def get_user_cache(self) -> MappingProxyType[UUID, User]:
        """Get read-only view of user cache."""
        return MappingProxyType(self._users)

    async def list_users(self, limit: int = 100, offset: int = 0) -> PaginationResult[User]:
        """Get users, newest first."""
        total = await self._collection.count_documents({})
        cursor = self._collection.find({}).sort("created_at", -1).skip(offset).limit(limit)
        items = await User.list_cursor(cursor)
        return PaginationResult(items=items, total=total, limit=limit, offset=offset)

    async def create_user(
        self, email: str, password: str, display_name: str | None = None, role: Role = Role.VOLUNTEER
    ) -> User:
        """Create user with hashed password. New accounts default to the volunteer role."""
        email = normalize_email(email)
        if self.has_email(email):
            raise ValidationError(f"User '{email}' already exists")

        validate_password(password)
        password_hash = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
        user = User(email=email, display_name=display_name, password_hash=password_hash, role=role)
        res = await self._collection.insert_one(user.to_mongo())
        logger.info("user_created", user_id=user.id, role=role)
        return await self.update_user_cache(res.inserted_id)

    def verify_password(self, email: str, password: str) -> bool:
        """Verify password against stored hash."""
        email = email.strip().lower()
        user = next((u for u in self._users.values() if u.email == email), None)
        if user is None:
            return False
        return bcrypt.checkpw(password.encode("utf-8"), user.password_hash.encode("utf-8"))

    async def change_password(self, user_id: UUID, old_password: str, new_password: str) -> None:
        """Change user password after verifying current password."""
        user = self.get_user(user_id)
        if not bcrypt.checkpw(old_password.encode("utf-8"), user.password_hash.encode("utf-8")):
            raise ValidationError("Invalid current password")

        validate_password(new_password)
        password_hash = bcrypt.hashpw(new_password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")
        await self._collection.update_one({"_id": user_id}, {"$set": {"password_hash": password_hash}})
        await self.update_user_cache(user_id)

    async def set_role(self, user_id: UUID, role: Role) -> User:
        """Update the durable profile role. Session claims are refreshed separately."""
        self.get_user(user_id)
        await self._collection.update_one({"_id": user_id}, {"$set": {"role": role}})
        logger.info("user_role_updated", user_id=user_id, role=role)
        return await self.update_user_cache(user_id)

    async def set_advisory_board_status(self, user_id: UUID, status: bool) -> User:
        self.get_user(user_id)
        await self._collection.update_one({"_id": user_id}, {"$set": {"is_advisory_board_member": status}})
        logger.info("advisory_board_status_updated", user_id=user_id, status=status)
        return await self.update_user_cache(user_id)

    def list_advisory_board_members(self) -> list[User]:
        """Advisory board members from cache, ordered by display name."""
        members = [user for user in self._users.values() if user.is_advisory_board_member]
        return sorted(members, key=lambda user: user.name.lower())

    async def update_profile(self, user_id: UUID, update: ProfileUpdate) -> User:
        """Apply a partial profile update."""
        self.get_user(user_id)
        changes = update.model_dump(exclude_none=True)
        if changes:
            await self._collection.update_one({"_id": user_id}, {"$set": changes})
        user = await self.update_user_cache(user_id)
        self.core.services.session.forget_user(user_id)
        return user

    async def upload_profile_photo(self, user_id: UUID, content: bytes, mime_type: str) -> User:
        """Store a profile photo in the blob store, overwriting the previous one."""
        self.get_user(user_id)
        if not mime_type.startswith("image/"):
            raise ValidationError("Only image files are allowed.")
        if not content:
            raise ValidationError("Missing photo data.")
        self.core.services.storage.ensure_size(content)

        extension = PHOTO_EXTENSIONS.get(mime_type, "jpg")
        storage_path = f"profile_photos/{user_id}/profile_photo.{extension}"
        self.core.services.storage.save(storage_path, content)

        photo_url = f"/api/v1/users/{user_id}/photo"
        await self._collection.update_one(
            {"_id": user_id}, {"$set": {"photo_url": photo_url, "photo_storage_path": storage_path}}
        )
        logger.info("profile_photo_uploaded", user_id=user_id)
        return await self.update_user_cache(user_id)

    def get_photo_storage_path(self, user_id: UUID) -> str:
        user = self.get_user(user_id)
        if user.photo_storage_path is None:
            raise NotFoundError(f"User '{user_id}' has no profile photo")
        return user.photo_storage_path

    async def ensure_admin_user_exists(self) -> None:
        """Create the bootstrap admin account if no admin exists."""
        if any(user.role == Role.ADMIN for user in self._users.values()):
            return
        config = self.core.config
        if self.has_email(config.admin_email):
            user = self.get_user_by_email(config.admin_email)
            await self.set_role(user.id, Role.ADMIN)
            return
        await self.create_user(config.admin_email, config.admin_password, display_name="Administrator", role=Role.ADMIN)

    async def update_all_users_cache(self) -> None:
        """Reload all users cache from database."""
        users = await User.list_cursor(self._collection.find())
        self._users = {user.id: user for user in users}

    async def update_user_cache(self, user_id: UUID) -> User:
        """Reload a specific user cache from database."""
        user = await self._collection.find_one({"_id": user_id})
        if user is None:
            raise NotFoundError(f"User '{user_id}' not found")
        self._users[user_id] = User.model_validate(user)
        return self._users[user_id]

    async def on_start(self) -> None:
        """Initialize indexes, cache, and admin user."""
        await self._collection.create_index([("email", 1)], unique=True)
        await self._collection.create_index([("created_at", -1)])
        await self.update_all_users_cache()
        await self.ensure_admin_user_exists()
        logger.debug("user_service_started", user_count=len(self._users))
