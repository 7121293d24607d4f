"""Tests for accounts, sessions and role claims."""

from uuid import uuid4

import pytest

from champions.core.modules.user.models import ProfileUpdate, Role
from champions.errors import AuthenticationError, NotFoundError, ValidationError


@pytest.fixture
def users(core):
    return core.services.user


@pytest.fixture
def sessions(core):
    return core.services.session


class TestAccounts:
    async def test_new_user_is_volunteer(self, users):
        user = await users.create_user("New@Example.com", "secret1", "Newbie")
        assert user.email == "new@example.com"
        assert user.role == Role.VOLUNTEER
        assert user.password_hash != "secret1"
        assert users.verify_password("new@example.com", "secret1")
        assert not users.verify_password("new@example.com", "wrong-pass")

    async def test_duplicate_email(self, users):
        await users.create_user("a@example.com", "secret1")
        with pytest.raises(ValidationError, match="already exists"):
            await users.create_user("A@example.com", "secret2")

    async def test_bootstrap_admin(self, users, config):
        await users.on_start()
        admin = users.get_user_by_email(config.admin_email)
        assert admin.role == Role.ADMIN
        assert users.verify_password(config.admin_email, config.admin_password)

    async def test_bootstrap_admin_runs_once(self, users, database):
        await users.on_start()
        await users.on_start()
        assert len(database.get_collection("users").documents) == 1

    async def test_change_password(self, users):
        user = await users.create_user("a@example.com", "secret1")
        with pytest.raises(ValidationError):
            await users.change_password(user.id, "not-it", "secret2")
        await users.change_password(user.id, "secret1", "secret2")
        assert users.verify_password("a@example.com", "secret2")

    async def test_update_profile_keeps_unset_fields(self, users):
        user = await users.create_user("a@example.com", "secret1", "Ann")
        await users.update_profile(user.id, ProfileUpdate(institution="County Clinic"))
        updated = await users.update_profile(user.id, ProfileUpdate(bio="Nurse"))
        assert updated.display_name == "Ann"
        assert updated.institution == "County Clinic"
        assert updated.bio == "Nurse"

    async def test_profile_photo_must_be_image(self, users):
        user = await users.create_user("a@example.com", "secret1")
        with pytest.raises(ValidationError):
            await users.upload_profile_photo(user.id, b"%PDF", "application/pdf")

    async def test_profile_photo_stored(self, users, core):
        user = await users.create_user("a@example.com", "secret1")
        updated = await users.upload_profile_photo(user.id, b"\x89PNG", "image/png")
        assert updated.photo_url == f"/api/v1/users/{user.id}/photo"
        path = core.services.storage.get_path(users.get_photo_storage_path(user.id))
        assert path.name == "profile_photo.png"
        assert path.read_bytes() == b"\x89PNG"

    async def test_no_photo(self, users):
        user = await users.create_user("a@example.com", "secret1")
        with pytest.raises(NotFoundError):
            users.get_photo_storage_path(user.id)


class TestAdvisoryBoard:
    async def test_members_listed_by_name(self, users):
        zoe = await users.create_user("zoe@example.com", "secret1", "Zoe")
        amir = await users.create_user("amir@example.com", "secret1", "amir")
        await users.create_user("other@example.com", "secret1", "Other")

        await users.set_advisory_board_status(zoe.id, True)
        updated = await users.set_advisory_board_status(amir.id, True)

        assert updated.is_advisory_board_member
        assert [user.name for user in users.list_advisory_board_members()] == ["amir", "Zoe"]

    async def test_removed_member_not_listed(self, users, database):
        user = await users.create_user("a@example.com", "secret1", "Ann")
        await users.set_advisory_board_status(user.id, True)
        await users.set_advisory_board_status(user.id, False)

        assert users.list_advisory_board_members() == []
        assert database.get_collection("users").documents[0]["is_advisory_board_member"] is False

    async def test_unknown_user(self, users):
        with pytest.raises(NotFoundError):
            await users.set_advisory_board_status(uuid4(), True)


class TestSessions:
    async def test_actor_carries_role_claim(self, users, sessions):
        user = await users.create_user("lead@example.com", "secret1", "Lee", role=Role.INSTITUTIONAL_LEAD)
        token = await sessions.create_session(user.id)

        actor = await sessions.get_actor(token)

        assert actor.id == user.id
        assert actor.name == "Lee"
        assert actor.role == Role.INSTITUTIONAL_LEAD

    async def test_claim_lags_until_refreshed(self, users, sessions):
        user = await users.create_user("v@example.com", "secret1")
        token = await sessions.create_session(user.id)
        await sessions.get_actor(token)

        await users.set_role(user.id, Role.MODERATOR)
        assert (await sessions.get_actor(token)).role == Role.VOLUNTEER

        assert await sessions.refresh_claims(user.id) == 1
        assert (await sessions.get_actor(token)).role == Role.MODERATOR

    async def test_invalid_token(self, sessions):
        assert not await sessions.is_auth_token_valid("nope")
        with pytest.raises(AuthenticationError):
            await sessions.get_actor("nope")

    async def test_logout_invalidates(self, users, sessions):
        user = await users.create_user("v@example.com", "secret1")
        token = await sessions.create_session(user.id)
        assert await sessions.is_auth_token_valid(token)
        await sessions.invalidate_session(token)
        assert not await sessions.is_auth_token_valid(token)

    async def test_renamed_author_on_next_post(self, users, sessions, core):
        user = await users.create_user("a@example.com", "secret1", "Old Name")
        token = await sessions.create_session(user.id)
        await sessions.get_actor(token)

        await users.update_profile(user.id, ProfileUpdate(display_name="New Name"))
        actor = await sessions.get_actor(token)
        post = await core.services.post.create_post(actor, "Clinic hours", "Open on Saturday morning.")

        assert actor.name == "New Name"
        assert post.author_name == "New Name"
