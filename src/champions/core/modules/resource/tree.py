"""Folder navigation over parent-pointer records."""

from collections.abc import Iterable, Mapping
from uuid import UUID

from champions.core.modules.access.permissions import can_view
from champions.core.modules.resource.models import Breadcrumb, ResourceItem, ResourceType
from champions.core.modules.user.models import Role


def sort_key(item: ResourceItem) -> tuple[int, str]:
    """Folders before files, then by name (case-sensitive)."""
    return (0 if item.type == ResourceType.FOLDER else 1, item.name)


def visible_children(items: Iterable[ResourceItem], role: Role | None) -> list[ResourceItem]:
    """Filter one folder level to what `role` may view and order it for display."""
    return sorted((item for item in items if can_view(role, item.access_level)), key=sort_key)


def build_breadcrumbs(
    folder_id: UUID | None, folders: Mapping[UUID, ResourceItem], role: Role | None
) -> list[Breadcrumb]:
    """Root-to-folder path for `folder_id`, reconstructed by walking parent pointers.

    The walk stops at the first ancestor missing from `folders`, so a broken
    chain yields the path below the break. Parent pointers are not checked for
    cycles on write; a revisited folder also ends the walk. So does a folder
    `role` may not view, keeping its name out of the path.
    """
    path: list[Breadcrumb] = []
    seen: set[UUID] = set()
    current = folder_id
    while current is not None and current not in seen:
        folder = folders.get(current)
        if folder is None or not can_view(role, folder.access_level):
            break
        seen.add(current)
        path.append(Breadcrumb(id=folder.id, name=folder.name))
        current = folder.parent_id
    path.reverse()
    return path
