from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import Field

from champions.core.db import ApiModel, MongoModel
from champions.utils import now


class Role(StrEnum):
    """Permission level attached to a user identity."""

    ADMIN = "admin"
    MODERATOR = "moderator"
    INSTITUTIONAL_LEAD = "institutional-lead"
    LEARNER = "learner"
    VOLUNTEER = "volunteer"


class SocialLinks(ApiModel):
    linkedin: str | None = None
    twitter: str | None = None
    facebook: str | None = None
    instagram: str | None = None


class User(MongoModel):
    """User profile with credentials. The `role` here is the durable profile role."""

    email: str  # Login name, unique
    display_name: str | None = None
    password_hash: str  # bcrypt hash
    role: Role = Role.VOLUNTEER
    photo_url: str | None = None
    photo_storage_path: str | None = None  # Blob path behind photo_url
    created_at: datetime = Field(default_factory=now)
    is_advisory_board_member: bool = False
    institution: str | None = None
    title: str | None = None  # Leads
    bio: str | None = None
    year_in_school: str | None = None  # Learners
    work_address: str | None = None  # Leads
    cell_phone: str | None = None  # Leads
    social_links: SocialLinks = Field(default_factory=SocialLinks)

    @property
    def name(self) -> str:
        """Name shown next to posts and comments."""
        return self.display_name or self.email


class UserView(ApiModel):
    """User account information (API representation)."""

    id: UUID = Field(..., description="User ID")
    email: str = Field(..., description="Login email")
    display_name: str | None = Field(None, description="Display name")
    role: Role = Field(..., description="Profile role")
    photo_url: str | None = Field(None, description="Profile photo URL")
    created_at: datetime = Field(..., description="Account creation time")
    is_advisory_board_member: bool = False
    institution: str | None = None
    title: str | None = None
    bio: str | None = None
    year_in_school: str | None = None
    work_address: str | None = None
    cell_phone: str | None = None
    social_links: SocialLinks = Field(default_factory=SocialLinks)

    @classmethod
    def from_domain(cls, user: User) -> "UserView":
        """Create view model from domain model."""
        return cls.model_validate(user.model_dump(exclude={"password_hash", "photo_storage_path"}))


class ProfileUpdate(ApiModel):
    """Editable profile fields. Fields left as None are not changed."""

    display_name: str | None = Field(None, max_length=100)
    institution: str | None = Field(None, max_length=200)
    title: str | None = Field(None, max_length=200)
    bio: str | None = Field(None, max_length=2000)
    year_in_school: str | None = Field(None, max_length=50)
    work_address: str | None = Field(None, max_length=300)
    cell_phone: str | None = Field(None, max_length=50)
    social_links: SocialLinks | None = None
