"""Resource library items: folders and files linked by parent pointers."""

from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import Field

from champions.core.db import ApiModel, MongoModel
from champions.utils import now


class ResourceType(StrEnum):
    FOLDER = "folder"
    FILE = "file"


class AccessLevel(StrEnum):
    """Minimum classification a viewer needs to see an item."""

    PUBLIC = "public"
    LEARNER = "learner"
    LEAD = "lead"
    ADMIN = "admin"


class ResourceItem(MongoModel):
    """Folder or file. `parent_id=None` places the item at the root."""

    name: str  # Unique only among siblings
    type: ResourceType
    parent_id: UUID | None = None
    access_level: AccessLevel = AccessLevel.PUBLIC

    # File-only attributes
    mime_type: str | None = None
    url: str | None = None
    storage_path: str | None = None
    size: int | None = None  # Bytes

    created_by: UUID | None = None
    uploaded_by: UUID | None = None
    created_at: datetime = Field(default_factory=now)
    updated_at: datetime = Field(default_factory=now)

    @property
    def is_folder(self) -> bool:
        return self.type == ResourceType.FOLDER


class Breadcrumb(ApiModel):
    """One step of the root-to-folder navigation path."""

    id: UUID
    name: str


class FolderListing(ApiModel):
    """Visible children of a folder together with the path leading to it."""

    folder_id: UUID | None = Field(None, description="Listed folder, null for the root")
    breadcrumbs: list[Breadcrumb] = Field(default_factory=list, description="Root-to-folder path")
    items: list[ResourceItem] = Field(default_factory=list, description="Folders first, then files, by name")


class ResourceFileInfo(ApiModel):
    """Information about a stored file for download."""

    storage_path: str
    filename: str
    mime_type: str
