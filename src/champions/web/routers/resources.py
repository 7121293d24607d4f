"""Resource library endpoints: folder browsing, folder management and file transfer."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Form, Query, UploadFile
from fastapi.responses import FileResponse
from pydantic import Field

from champions.core.db import ApiModel
from champions.core.modules.resource.models import AccessLevel, Breadcrumb, FolderListing, ResourceItem
from champions.web.deps import AppDep, AuthTokenDep
from champions.web.openapi import ErrorResponse

router = APIRouter(tags=["resources"])


class CreateFolderRequest(ApiModel):
    """Request to create a folder."""

    name: str = Field(..., min_length=1, max_length=200, description="Folder name")
    parent_id: UUID | None = Field(None, description="Containing folder, null for the root")


class RenameRequest(ApiModel):
    """Request to rename a folder or file."""

    name: str = Field(..., min_length=1, max_length=200, description="New name")


@router.get(
    "/resources",
    summary="List folder contents",
    description="Visible children of a folder (root when `parentId` is omitted), folders first then by name.",
    operation_id="listResources",
    responses={
        200: {"description": "Visible children"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_resources(
    app: AppDep,
    auth_token: AuthTokenDep,
    parent_id: Annotated[UUID | None, Query(alias="parentId", description="Folder to list")] = None,
) -> list[ResourceItem]:
    return await app.list_resources(auth_token, parent_id)


@router.get(
    "/resources/browse",
    summary="Browse folder",
    description="Folder contents together with the breadcrumb path leading to it.",
    operation_id="browseResources",
    responses={
        200: {"description": "Folder listing"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Folder not visible to this role"},
        404: {"model": ErrorResponse, "description": "Folder not found"},
    },
)
async def browse_resources(
    app: AppDep,
    auth_token: AuthTokenDep,
    folder_id: Annotated[UUID | None, Query(alias="folderId", description="Folder to open")] = None,
) -> FolderListing:
    return await app.browse_resources(auth_token, folder_id)


@router.get(
    "/resources/{folder_id}/breadcrumbs",
    summary="Get breadcrumbs",
    description="Root-to-folder navigation path. Truncated where an ancestor is missing.",
    operation_id="getResourceBreadcrumbs",
    responses={
        200: {"description": "Breadcrumb path"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_breadcrumbs(folder_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> list[Breadcrumb]:
    return await app.get_resource_breadcrumbs(auth_token, folder_id)


@router.post(
    "/resources/folders",
    summary="Create folder",
    description="Create a public folder. Requires admin, moderator or institutional lead role.",
    operation_id="createFolder",
    status_code=201,
    responses={
        201: {"description": "Folder created"},
        400: {"model": ErrorResponse, "description": "Invalid name or parent is not a folder"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Role cannot manage resources"},
        404: {"model": ErrorResponse, "description": "Parent folder not found"},
    },
)
async def create_folder(request: CreateFolderRequest, app: AppDep, auth_token: AuthTokenDep) -> ResourceItem:
    return await app.create_folder(auth_token, request.name, request.parent_id)


@router.post(
    "/resources/files",
    summary="Upload file",
    description="Upload a file into a folder. Access level defaults to `learner`.",
    operation_id="uploadResourceFile",
    status_code=201,
    responses={
        201: {"description": "File uploaded"},
        400: {"model": ErrorResponse, "description": "Missing data or file too large"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Role cannot manage resources"},
        404: {"model": ErrorResponse, "description": "Parent folder not found"},
    },
)
async def upload_file(
    file: UploadFile,
    app: AppDep,
    auth_token: AuthTokenDep,
    parent_id: Annotated[UUID | None, Form(alias="parentId")] = None,
    access_level: Annotated[AccessLevel | None, Form(alias="accessLevel")] = None,
) -> ResourceItem:
    content = await file.read()
    name = file.filename or "unnamed"
    mime_type = file.content_type or "application/octet-stream"
    return await app.upload_resource_file(auth_token, content, name, mime_type, parent_id, access_level)


@router.patch(
    "/resources/{resource_id}",
    summary="Rename",
    description="Rename a folder or file. Requires moderator/admin, or institutional lead who created it.",
    operation_id="renameResource",
    responses={
        200: {"description": "Renamed item"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not permitted to edit this item"},
        404: {"model": ErrorResponse, "description": "Item not found"},
    },
)
async def rename_resource(
    resource_id: UUID, request: RenameRequest, app: AppDep, auth_token: AuthTokenDep
) -> ResourceItem:
    return await app.rename_resource(auth_token, resource_id, request.name)


@router.delete(
    "/resources/{resource_id}",
    summary="Delete",
    description="Delete a file, or an empty folder.",
    operation_id="deleteResource",
    status_code=204,
    responses={
        204: {"description": "Item deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not permitted to edit this item"},
        404: {"model": ErrorResponse, "description": "Item not found"},
        409: {"model": ErrorResponse, "description": "Folder is not empty"},
    },
)
async def delete_resource(resource_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.delete_resource(auth_token, resource_id)


@router.get(
    "/resources/{resource_id}/download",
    summary="Download file",
    operation_id="downloadResource",
    response_class=FileResponse,
    responses={
        200: {"description": "File content"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "File not visible to this role"},
        404: {"model": ErrorResponse, "description": "File not found"},
    },
)
async def download_resource(resource_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> FileResponse:
    path, info = await app.get_resource_file(auth_token, resource_id)
    return FileResponse(path=path, media_type=info.mime_type, filename=info.filename)
