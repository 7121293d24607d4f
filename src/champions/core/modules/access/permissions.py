"""Pure permission predicates shared by the forum, the resource library and events."""

from uuid import UUID

from champions.core.modules.access.models import Actor
from champions.core.modules.resource.models import AccessLevel, ResourceItem
from champions.core.modules.user.models import Role

MANAGER_ROLES = frozenset({Role.ADMIN, Role.MODERATOR, Role.INSTITUTIONAL_LEAD})
MODERATOR_ROLES = frozenset({Role.ADMIN, Role.MODERATOR})


def can_manage(role: Role | None) -> bool:
    """Whether the role may create folders and upload files."""
    return role in MANAGER_ROLES


def can_moderate(role: Role | None) -> bool:
    return role in MODERATOR_ROLES


def is_owner(resource: ResourceItem, actor_id: UUID) -> bool:
    return resource.created_by == actor_id or resource.uploaded_by == actor_id


def can_view(role: Role | None, access_level: AccessLevel) -> bool:
    """Whether a viewer with `role` may see an item classified `access_level`.

    public: everyone. admin/moderator: everything. learner: learners and
    institutional leads. lead: institutional leads only. `admin`-level items
    are therefore visible to admins and moderators only.
    """
    if access_level == AccessLevel.PUBLIC:
        return True
    if can_moderate(role):
        return True
    if access_level == AccessLevel.LEARNER:
        return role in (Role.LEARNER, Role.INSTITUTIONAL_LEAD)
    if access_level == AccessLevel.LEAD:
        return role == Role.INSTITUTIONAL_LEAD
    return False


def can_edit_resource(actor: Actor, resource: ResourceItem) -> bool:
    """Rename/delete rule: moderators edit anything, institutional leads edit what they own."""
    if can_moderate(actor.role):
        return True
    return actor.role == Role.INSTITUTIONAL_LEAD and is_owner(resource, actor.id)


def can_delete_forum_item(actor: Actor, author_id: UUID) -> bool:
    """Posts and comments can be deleted by their author or by any moderator."""
    return author_id == actor.id or can_moderate(actor.role)


def visible_access_levels(role: Role | None) -> list[AccessLevel]:
    return [level for level in AccessLevel if can_view(role, level)]
