"""Tests for the permission predicates."""

from uuid import uuid4

import pytest

from champions.core.modules.access.models import Actor
from champions.core.modules.access.permissions import (
    can_delete_forum_item,
    can_edit_resource,
    can_manage,
    can_moderate,
    can_view,
    is_owner,
    visible_access_levels,
)
from champions.core.modules.resource.models import AccessLevel, ResourceItem, ResourceType
from champions.core.modules.user.models import Role

# Expected visibility per (role, access level)
VISIBILITY = {
    Role.ADMIN: {AccessLevel.PUBLIC, AccessLevel.LEARNER, AccessLevel.LEAD, AccessLevel.ADMIN},
    Role.MODERATOR: {AccessLevel.PUBLIC, AccessLevel.LEARNER, AccessLevel.LEAD, AccessLevel.ADMIN},
    Role.INSTITUTIONAL_LEAD: {AccessLevel.PUBLIC, AccessLevel.LEARNER, AccessLevel.LEAD},
    Role.LEARNER: {AccessLevel.PUBLIC, AccessLevel.LEARNER},
    Role.VOLUNTEER: {AccessLevel.PUBLIC},
    None: {AccessLevel.PUBLIC},
}


class TestRolePredicates:
    @pytest.mark.parametrize("role", [Role.ADMIN, Role.MODERATOR, Role.INSTITUTIONAL_LEAD])
    def test_managers(self, role):
        assert can_manage(role)

    @pytest.mark.parametrize("role", [Role.LEARNER, Role.VOLUNTEER, None])
    def test_non_managers(self, role):
        assert not can_manage(role)

    def test_moderators(self):
        assert can_moderate(Role.ADMIN)
        assert can_moderate(Role.MODERATOR)
        assert not can_moderate(Role.INSTITUTIONAL_LEAD)
        assert not can_moderate(None)


class TestCanView:
    @pytest.mark.parametrize("role", list(VISIBILITY))
    @pytest.mark.parametrize("level", list(AccessLevel))
    def test_visibility_matrix(self, role, level):
        assert can_view(role, level) == (level in VISIBILITY[role])

    @pytest.mark.parametrize("role", list(VISIBILITY))
    def test_visible_levels_match_matrix(self, role):
        assert set(visible_access_levels(role)) == VISIBILITY[role]

    def test_visible_levels_ordered_least_restricted_first(self):
        assert visible_access_levels(Role.INSTITUTIONAL_LEAD) == [AccessLevel.PUBLIC, AccessLevel.LEARNER, AccessLevel.LEAD]


class TestOwnership:
    def test_creator_and_uploader_are_owners(self):
        creator, uploader = uuid4(), uuid4()
        item = ResourceItem(name="f.pdf", type=ResourceType.FILE, created_by=creator, uploaded_by=uploader)
        assert is_owner(item, creator)
        assert is_owner(item, uploader)
        assert not is_owner(item, uuid4())

    def test_lead_edits_only_own_items(self, lead):
        own = ResourceItem(name="mine", type=ResourceType.FOLDER, created_by=lead.id)
        other = ResourceItem(name="theirs", type=ResourceType.FOLDER, created_by=uuid4())
        assert can_edit_resource(lead, own)
        assert not can_edit_resource(lead, other)

    def test_moderators_edit_anything(self, admin, moderator):
        item = ResourceItem(name="x", type=ResourceType.FOLDER, created_by=uuid4())
        assert can_edit_resource(admin, item)
        assert can_edit_resource(moderator, item)

    def test_learner_cannot_edit_even_when_owner(self, learner):
        item = ResourceItem(name="x", type=ResourceType.FOLDER, created_by=learner.id)
        assert not can_edit_resource(learner, item)


class TestForumDeletion:
    def test_author_can_delete(self, volunteer):
        assert can_delete_forum_item(volunteer, volunteer.id)

    def test_other_volunteer_cannot_delete(self, volunteer):
        assert not can_delete_forum_item(volunteer, uuid4())

    def test_moderator_can_delete_any(self, moderator):
        assert can_delete_forum_item(moderator, uuid4())

    def test_lead_is_not_a_moderator(self):
        lead = Actor(id=uuid4(), name="Lead", role=Role.INSTITUTIONAL_LEAD)
        assert not can_delete_forum_item(lead, uuid4())
