import time
from typing import Any
from uuid import UUID

import structlog
from pymongo.asynchronous.database import AsyncDatabase

from champions.core.core import Service
from champions.core.modules.access.models import Actor
from champions.core.modules.access.permissions import can_edit_resource, can_manage, can_view
from champions.core.modules.resource.models import (
    AccessLevel,
    Breadcrumb,
    FolderListing,
    ResourceFileInfo,
    ResourceItem,
    ResourceType,
)
from champions.core.modules.resource.tree import build_breadcrumbs, visible_children
from champions.core.modules.storage.files import build_resource_storage_path
from champions.errors import AccessDeniedError, FailedPreconditionError, NotFoundError, ValidationError
from champions.utils import now

logger = structlog.get_logger(__name__)


class ResourceService(Service):
    """Resource library: role-filtered folder tree with file blobs."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("resources")

    async def on_start(self) -> None:
        await self._collection.create_index([("parent_id", 1)])
        await self._collection.create_index([("type", 1)])

    async def get_resource(self, resource_id: UUID) -> ResourceItem:
        doc = await self._collection.find_one({"_id": resource_id})
        if doc is None:
            raise NotFoundError("Resource not found")
        return ResourceItem.model_validate(doc)

    async def list_children(self, parent_id: UUID | None, actor: Actor) -> list[ResourceItem]:
        """Immediate children of `parent_id` (None = root) that the actor may view."""
        items = await ResourceItem.list_cursor(self._collection.find({"parent_id": parent_id}))
        visible = visible_children(items, actor.role)
        logger.debug("list_resources", parent_id=parent_id, role=actor.role, total=len(items), visible=len(visible))
        return visible

    async def get_breadcrumbs(self, folder_id: UUID | None, actor: Actor) -> list[Breadcrumb]:
        """Root-to-folder path, usable for deep links.

        A broken chain is truncated, and so is the part above the first ancestor
        the actor may not view. A hidden target raises AccessDeniedError.
        """
        folders: dict[UUID, ResourceItem] = {}
        current = folder_id
        while current is not None and current not in folders:
            doc = await self._collection.find_one({"_id": current})
            if doc is None:
                break
            folder = ResourceItem.model_validate(doc)
            folders[current] = folder
            current = folder.parent_id

        target = folders.get(folder_id) if folder_id is not None else None
        if target is not None and not can_view(actor.role, target.access_level):
            raise AccessDeniedError("You do not have permission to view this folder.")
        return build_breadcrumbs(folder_id, folders, actor.role)

    async def browse(self, folder_id: UUID | None, actor: Actor) -> FolderListing:
        """Folder contents plus breadcrumbs in one call."""
        if folder_id is not None:
            folder = await self.get_resource(folder_id)
            if not folder.is_folder:
                raise ValidationError("Resource is not a folder")
            if not can_view(actor.role, folder.access_level):
                raise AccessDeniedError("You do not have permission to view this folder.")
        return FolderListing(
            folder_id=folder_id,
            breadcrumbs=await self.get_breadcrumbs(folder_id, actor),
            items=await self.list_children(folder_id, actor),
        )

    async def create_folder(self, actor: Actor, name: str, parent_id: UUID | None) -> ResourceItem:
        """Create a public folder owned by the actor. Retrying creates a duplicate."""
        if not can_manage(actor.role):
            raise AccessDeniedError("Only authorized users can create folders.")
        name = name.strip()
        if not name:
            raise ValidationError("Folder name is required")
        await self._ensure_parent_folder(parent_id)

        folder = ResourceItem(
            name=name,
            type=ResourceType.FOLDER,
            parent_id=parent_id,
            access_level=AccessLevel.PUBLIC,
            created_by=actor.id,
        )
        await self._collection.insert_one(folder.to_mongo())
        logger.info("folder_created", resource_id=folder.id, parent_id=parent_id, actor_id=actor.id)
        return folder

    async def rename(self, actor: Actor, resource_id: UUID, new_name: str) -> ResourceItem:
        new_name = new_name.strip()
        if not new_name:
            raise ValidationError("Resource ID and new name are required")
        resource = await self.get_resource(resource_id)
        if not can_edit_resource(actor, resource):
            raise AccessDeniedError("You do not have permission to rename this resource.")

        await self._collection.update_one({"_id": resource_id}, {"$set": {"name": new_name, "updated_at": now()}})
        logger.info("resource_renamed", resource_id=resource_id, actor_id=actor.id)
        return await self.get_resource(resource_id)

    async def delete(self, actor: Actor, resource_id: UUID) -> None:
        """Delete a file or an empty folder.

        File blobs are removed before the metadata; a failed blob removal is
        logged and the metadata is still deleted.
        """
        resource = await self.get_resource(resource_id)
        if not can_edit_resource(actor, resource):
            raise AccessDeniedError("You do not have permission to delete this resource.")

        if resource.is_folder:
            child = await self._collection.find_one({"parent_id": resource_id})
            if child is not None:
                raise FailedPreconditionError("Folder is not empty. Please delete contents first.")
        elif resource.storage_path:
            try:
                self.core.services.storage.delete(resource.storage_path)
            except (OSError, ValueError) as e:
                logger.warning("blob_delete_failed", storage_path=resource.storage_path, error=str(e))

        result = await self._collection.delete_one({"_id": resource_id})
        if result.deleted_count == 0:
            raise NotFoundError("Resource not found")
        logger.info("resource_deleted", resource_id=resource_id, type=resource.type, actor_id=actor.id)

    async def upload_file(
        self,
        actor: Actor,
        content: bytes,
        name: str,
        mime_type: str,
        parent_id: UUID | None,
        access_level: AccessLevel | None = None,
    ) -> ResourceItem:
        """Store the blob, then its metadata. Access level defaults to `learner`."""
        if not can_manage(actor.role):
            raise AccessDeniedError("Only authorized users can upload files.")
        if not content or not name or not mime_type:
            raise ValidationError("Missing file data.")
        self.core.services.storage.ensure_size(content)
        await self._ensure_parent_folder(parent_id)

        storage_path = build_resource_storage_path(str(actor.id), int(time.time() * 1000), name)
        self.core.services.storage.save(storage_path, content)

        item = ResourceItem(
            name=name,
            type=ResourceType.FILE,
            parent_id=parent_id,
            access_level=access_level or AccessLevel.LEARNER,
            mime_type=mime_type,
            storage_path=storage_path,
            size=len(content),
            created_by=actor.id,
            uploaded_by=actor.id,
        )
        item.url = f"/api/v1/resources/{item.id}/download"
        await self._collection.insert_one(item.to_mongo())
        logger.info("file_uploaded", resource_id=item.id, size=item.size, access_level=item.access_level, actor_id=actor.id)
        return item

    async def get_file_info(self, actor: Actor, resource_id: UUID) -> ResourceFileInfo:
        """Blob location of a file the actor may view."""
        resource = await self.get_resource(resource_id)
        if resource.is_folder or resource.storage_path is None:
            raise ValidationError("Resource is not a file")
        if not can_view(actor.role, resource.access_level):
            raise AccessDeniedError("You do not have permission to view this resource.")
        return ResourceFileInfo(
            storage_path=resource.storage_path,
            filename=resource.name,
            mime_type=resource.mime_type or "application/octet-stream",
        )

    async def _ensure_parent_folder(self, parent_id: UUID | None) -> None:
        if parent_id is None:
            return
        parent = await self.get_resource(parent_id)
        if not parent.is_folder:
            raise ValidationError("Parent resource is not a folder")
