from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from fastapi.responses import FileResponse
from pydantic import Field

from champions.core.db import ApiModel
from champions.core.modules.user.models import Role, UserView
from champions.core.pagination import PaginationResult
from champions.web.deps import AppDep, AuthTokenDep
from champions.web.openapi import ErrorResponse

router = APIRouter(tags=["users"])


class SetRoleRequest(ApiModel):
    """Request to change a user's role."""

    role: Role = Field(..., description="New profile role")


class AdvisoryBoardRequest(ApiModel):
    status: bool = Field(..., description="Whether the user sits on the advisory board")


@router.get(
    "/users",
    summary="List users",
    description="Get paginated users, newest first. Only accessible by admin users.",
    operation_id="listUsers",
    responses={
        200: {"description": "Paginated list of users"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
    },
)
async def list_users(
    app: AppDep,
    auth_token: AuthTokenDep,
    limit: Annotated[int, Query(ge=1, le=500, description="Maximum items to return")] = 100,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
) -> PaginationResult[UserView]:
    return await app.list_users(auth_token, limit, offset)


@router.put(
    "/users/{user_id}/role",
    summary="Change user role",
    description="Assign a new role. Active sessions of the user pick up the new role immediately.",
    operation_id="setUserRole",
    responses={
        200: {"description": "Updated user"},
        400: {"model": ErrorResponse, "description": "Cannot remove own admin role"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
async def set_user_role(user_id: UUID, request: SetRoleRequest, app: AppDep, auth_token: AuthTokenDep) -> UserView:
    return await app.set_user_role(auth_token, user_id, request.role)


@router.get(
    "/users/advisory-board",
    summary="List advisory board",
    description="Members of the advisory board, ordered by name.",
    operation_id="listAdvisoryBoardMembers",
    responses={
        200: {"description": "Advisory board members"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_advisory_board_members(app: AppDep, auth_token: AuthTokenDep) -> list[UserView]:
    return await app.list_advisory_board_members(auth_token)


@router.put(
    "/users/{user_id}/advisory-board",
    summary="Set advisory board status",
    description="Add a user to or remove them from the advisory board. Only accessible by admin users.",
    operation_id="setAdvisoryBoardStatus",
    responses={
        200: {"description": "Updated user"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
async def set_advisory_board_status(
    user_id: UUID, request: AdvisoryBoardRequest, app: AppDep, auth_token: AuthTokenDep
) -> UserView:
    return await app.set_advisory_board_status(auth_token, user_id, request.status)


@router.get(
    "/users/{user_id}/photo",
    summary="Get profile photo",
    description="Download the profile photo of a user.",
    operation_id="getUserPhoto",
    response_class=FileResponse,
    responses={
        200: {"description": "Photo file"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "User or photo not found"},
    },
)
async def get_user_photo(user_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> FileResponse:
    path = await app.get_user_photo_path(auth_token, user_id)
    return FileResponse(path=path)
