from fastapi import APIRouter, UploadFile
from pydantic import Field

from champions.core.db import ApiModel
from champions.core.modules.user.models import ProfileUpdate, UserView
from champions.web.deps import AppDep, AuthTokenDep
from champions.web.openapi import ErrorResponse

router = APIRouter(tags=["profile"])


class ChangePasswordRequest(ApiModel):
    """Request to change user password."""

    old_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=1, description="New password")


@router.get(
    "/profile",
    summary="Get current user profile",
    description="Get the profile of the currently authenticated user.",
    operation_id="getCurrentUserProfile",
    responses={
        200: {"description": "Current user profile"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_profile(app: AppDep, auth_token: AuthTokenDep) -> UserView:
    return await app.get_current_user(auth_token)


@router.patch(
    "/profile",
    summary="Update profile",
    description="Update display name and extended profile fields. Omitted fields are left unchanged.",
    operation_id="updateProfile",
    responses={
        200: {"description": "Updated profile"},
        400: {"model": ErrorResponse, "description": "Invalid request"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def update_profile(update: ProfileUpdate, app: AppDep, auth_token: AuthTokenDep) -> UserView:
    return await app.update_profile(auth_token, update)


@router.post(
    "/profile/photo",
    summary="Upload profile photo",
    description="Replace the profile photo of the current user. Only image files are accepted.",
    operation_id="uploadProfilePhoto",
    responses={
        200: {"description": "Updated profile"},
        400: {"model": ErrorResponse, "description": "Not an image or file too large"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def upload_profile_photo(file: UploadFile, app: AppDep, auth_token: AuthTokenDep) -> UserView:
    content = await file.read()
    mime_type = file.content_type or "application/octet-stream"
    return await app.upload_profile_photo(auth_token, content, mime_type)


@router.post(
    "/profile/change-password",
    summary="Change password",
    description="Change the password for the currently authenticated user.",
    operation_id="changePassword",
    status_code=204,
    responses={
        204: {"description": "Password changed successfully"},
        401: {"model": ErrorResponse, "description": "Not authenticated or invalid current password"},
        400: {"model": ErrorResponse, "description": "Invalid request"},
    },
)
async def change_password(request: ChangePasswordRequest, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.change_password(auth_token, request.old_password, request.new_password)
