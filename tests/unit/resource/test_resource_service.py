"""Tests for ResourceService against the in-memory collection."""

from uuid import uuid4

import pytest

from champions.core.modules.resource.models import AccessLevel, ResourceType
from champions.errors import AccessDeniedError, FailedPreconditionError, NotFoundError, ValidationError


@pytest.fixture
def resources(core):
    return core.services.resource


@pytest.fixture
def collection(database):
    return database.get_collection("resources")


class TestCreateFolder:
    async def test_creates_public_folder_owned_by_actor(self, resources, lead):
        folder = await resources.create_folder(lead, "  Training  ", None)
        assert folder.name == "Training"
        assert folder.type == ResourceType.FOLDER
        assert folder.access_level == AccessLevel.PUBLIC
        assert folder.created_by == lead.id
        assert (await resources.get_resource(folder.id)).name == "Training"

    async def test_learner_denied_without_write(self, resources, learner, collection):
        with pytest.raises(AccessDeniedError):
            await resources.create_folder(learner, "Mine", None)
        assert collection.documents == []

    async def test_blank_name_rejected(self, resources, admin):
        with pytest.raises(ValidationError):
            await resources.create_folder(admin, "   ", None)

    async def test_parent_must_exist(self, resources, admin, collection):
        with pytest.raises(NotFoundError):
            await resources.create_folder(admin, "Child", uuid4())
        assert collection.documents == []

    async def test_parent_must_be_folder(self, resources, admin):
        uploaded = await resources.upload_file(admin, b"data", "a.pdf", "application/pdf", None)
        with pytest.raises(ValidationError):
            await resources.create_folder(admin, "Child", uploaded.id)


class TestListing:
    async def test_children_filtered_and_sorted(self, resources, admin, volunteer, learner):
        parent = await resources.create_folder(admin, "Library", None)
        await resources.upload_file(admin, b"1", "b.pdf", "application/pdf", parent.id, AccessLevel.PUBLIC)
        await resources.upload_file(admin, b"2", "a.pdf", "application/pdf", parent.id)
        await resources.create_folder(admin, "Sub", parent.id)

        admin_view = await resources.list_children(parent.id, admin)
        assert [item.name for item in admin_view] == ["Sub", "a.pdf", "b.pdf"]

        learner_view = await resources.list_children(parent.id, learner)
        assert [item.name for item in learner_view] == ["Sub", "a.pdf", "b.pdf"]

        volunteer_view = await resources.list_children(parent.id, volunteer)
        assert [item.name for item in volunteer_view] == ["Sub", "b.pdf"]

    async def test_root_listing(self, resources, admin):
        await resources.create_folder(admin, "Root folder", None)
        nested = await resources.create_folder(admin, "Other", None)
        await resources.create_folder(admin, "Nested", nested.id)
        assert [item.name for item in await resources.list_children(None, admin)] == ["Other", "Root folder"]

    async def test_browse_returns_breadcrumbs(self, resources, admin):
        top = await resources.create_folder(admin, "Top", None)
        leaf = await resources.create_folder(admin, "Leaf", top.id)

        listing = await resources.browse(leaf.id, admin)

        assert listing.folder_id == leaf.id
        assert [crumb.name for crumb in listing.breadcrumbs] == ["Top", "Leaf"]
        assert listing.items == []

    async def test_browse_unknown_folder(self, resources, admin):
        with pytest.raises(NotFoundError):
            await resources.browse(uuid4(), admin)

    async def test_breadcrumbs_truncated_when_ancestor_removed(self, resources, admin, collection):
        top = await resources.create_folder(admin, "Top", None)
        middle = await resources.create_folder(admin, "Middle", top.id)
        leaf = await resources.create_folder(admin, "Leaf", middle.id)
        collection.documents = [doc for doc in collection.documents if doc["_id"] != top.id]

        crumbs = await resources.get_breadcrumbs(leaf.id, admin)

        assert [crumb.name for crumb in crumbs] == ["Middle", "Leaf"]

    async def test_breadcrumbs_stop_below_hidden_folder(self, resources, admin, volunteer, collection):
        secret = await resources.create_folder(admin, "Secret", None)
        child = await resources.create_folder(admin, "Child", secret.id)
        for doc in collection.documents:
            if doc["_id"] == secret.id:
                doc["access_level"] = AccessLevel.ADMIN

        crumbs = await resources.get_breadcrumbs(child.id, volunteer)

        assert [crumb.name for crumb in crumbs] == ["Child"]
        assert len(await resources.get_breadcrumbs(child.id, admin)) == 2

    async def test_breadcrumbs_of_hidden_folder_denied(self, resources, admin, volunteer, collection):
        secret = await resources.create_folder(admin, "Secret", None)
        for doc in collection.documents:
            if doc["_id"] == secret.id:
                doc["access_level"] = AccessLevel.ADMIN

        with pytest.raises(AccessDeniedError):
            await resources.get_breadcrumbs(secret.id, volunteer)


class TestRename:
    async def test_unknown_resource(self, resources, admin):
        with pytest.raises(NotFoundError):
            await resources.rename(admin, uuid4(), "New")

    async def test_lead_renames_own_folder(self, resources, lead):
        folder = await resources.create_folder(lead, "Old", None)
        renamed = await resources.rename(lead, folder.id, "New")
        assert renamed.name == "New"
        assert renamed.updated_at >= folder.updated_at

    async def test_lead_cannot_rename_foreign_folder(self, resources, admin, lead):
        folder = await resources.create_folder(admin, "Admin folder", None)
        with pytest.raises(AccessDeniedError):
            await resources.rename(lead, folder.id, "Hijacked")
        assert (await resources.get_resource(folder.id)).name == "Admin folder"

    async def test_learner_owner_cannot_rename(self, resources, admin, learner, collection):
        folder = await resources.create_folder(admin, "Study group", None)
        for doc in collection.documents:
            if doc["_id"] == folder.id:
                doc["created_by"] = learner.id

        with pytest.raises(AccessDeniedError):
            await resources.rename(learner, folder.id, "Renamed")
        assert (await resources.get_resource(folder.id)).name == "Study group"

    async def test_lead_uploader_can_rename(self, resources, admin, lead, collection):
        item = await resources.upload_file(admin, b"content", "notes.txt", "text/plain", None)
        for doc in collection.documents:
            if doc["_id"] == item.id:
                doc["created_by"] = uuid4()
                doc["uploaded_by"] = lead.id

        renamed = await resources.rename(lead, item.id, "lecture-notes.txt")

        assert renamed.name == "lecture-notes.txt"


class TestDelete:
    async def test_non_empty_folder_is_kept(self, resources, admin):
        parent = await resources.create_folder(admin, "Parent", None)
        await resources.create_folder(admin, "Child", parent.id)

        with pytest.raises(FailedPreconditionError):
            await resources.delete(admin, parent.id)
        assert (await resources.get_resource(parent.id)).name == "Parent"

    async def test_folder_with_hidden_child_is_kept(self, resources, admin, moderator):
        parent = await resources.create_folder(admin, "Parent", None)
        await resources.upload_file(admin, b"secret", "s.pdf", "application/pdf", parent.id, AccessLevel.ADMIN)
        with pytest.raises(FailedPreconditionError):
            await resources.delete(moderator, parent.id)

    async def test_empty_folder_deleted(self, resources, admin):
        folder = await resources.create_folder(admin, "Empty", None)
        await resources.delete(admin, folder.id)
        with pytest.raises(NotFoundError):
            await resources.get_resource(folder.id)

    async def test_file_delete_removes_blob(self, resources, admin, core):
        item = await resources.upload_file(admin, b"content", "notes.txt", "text/plain", None)
        blob = core.services.storage.get_path(item.storage_path)
        assert blob.read_bytes() == b"content"

        await resources.delete(admin, item.id)

        assert not blob.exists()
        with pytest.raises(NotFoundError):
            await resources.get_resource(item.id)

    async def test_missing_blob_does_not_block_delete(self, resources, admin, core):
        item = await resources.upload_file(admin, b"content", "notes.txt", "text/plain", None)
        core.services.storage.get_path(item.storage_path).unlink()

        await resources.delete(admin, item.id)

        with pytest.raises(NotFoundError):
            await resources.get_resource(item.id)

    async def test_lead_cannot_delete_foreign_file(self, resources, admin, lead):
        item = await resources.upload_file(admin, b"content", "notes.txt", "text/plain", None)
        with pytest.raises(AccessDeniedError):
            await resources.delete(lead, item.id)

    async def test_learner_owner_cannot_delete(self, resources, admin, learner, collection):
        item = await resources.upload_file(admin, b"content", "notes.txt", "text/plain", None)
        for doc in collection.documents:
            if doc["_id"] == item.id:
                doc["created_by"] = learner.id
                doc["uploaded_by"] = learner.id

        with pytest.raises(AccessDeniedError):
            await resources.delete(learner, item.id)
        assert (await resources.get_resource(item.id)).name == "notes.txt"


class TestUpload:
    async def test_defaults_to_learner_access(self, resources, lead):
        item = await resources.upload_file(lead, b"%PDF", "guide.pdf", "application/pdf", None)
        assert item.type == ResourceType.FILE
        assert item.access_level == AccessLevel.LEARNER
        assert item.size == 4
        assert item.uploaded_by == lead.id
        assert item.url == f"/api/v1/resources/{item.id}/download"
        assert item.storage_path.startswith(f"resources/{lead.id}/")
        assert item.storage_path.endswith("_guide.pdf")

    async def test_volunteer_denied(self, resources, volunteer, collection, config):
        with pytest.raises(AccessDeniedError):
            await resources.upload_file(volunteer, b"x", "a.pdf", "application/pdf", None)
        assert collection.documents == []

    async def test_oversized_file_rejected_before_write(self, resources, admin, collection, config, tmp_path):
        config.max_upload_size = 10
        with pytest.raises(ValidationError, match="too large"):
            await resources.upload_file(admin, b"x" * 11, "big.bin", "application/octet-stream", None)
        assert collection.documents == []
        assert not (tmp_path / "blobs" / "resources").exists()

    async def test_empty_file_rejected(self, resources, admin):
        with pytest.raises(ValidationError):
            await resources.upload_file(admin, b"", "empty.txt", "text/plain", None)

    async def test_file_info_respects_access_level(self, resources, admin, volunteer, learner):
        item = await resources.upload_file(admin, b"x", "a.pdf", "application/pdf", None)

        info = await resources.get_file_info(learner, item.id)
        assert info.filename == "a.pdf"
        assert info.mime_type == "application/pdf"

        with pytest.raises(AccessDeniedError):
            await resources.get_file_info(volunteer, item.id)
