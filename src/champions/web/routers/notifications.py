from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import Field

from champions.core.db import ApiModel
from champions.core.modules.notification.models import Notification
from champions.core.pagination import PaginationResult
from champions.web.deps import AppDep, AuthTokenDep
from champions.web.openapi import ErrorResponse

router = APIRouter(tags=["notifications"])


class UnreadCount(ApiModel):
    count: int = Field(..., ge=0)


@router.get(
    "/notifications",
    summary="List notifications",
    description="Get paginated notifications of the current user, newest first.",
    operation_id="listNotifications",
    responses={
        200: {"description": "Paginated list of notifications"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_notifications(
    app: AppDep,
    auth_token: AuthTokenDep,
    limit: Annotated[int, Query(ge=1, le=200, description="Maximum items to return")] = 50,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
) -> PaginationResult[Notification]:
    return await app.list_notifications(auth_token, limit, offset)


@router.get(
    "/notifications/unread-count",
    summary="Count unread notifications",
    operation_id="countUnreadNotifications",
    responses={
        200: {"description": "Number of unread notifications"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def count_unread(app: AppDep, auth_token: AuthTokenDep) -> UnreadCount:
    return UnreadCount(count=await app.count_unread_notifications(auth_token))


@router.post(
    "/notifications/read-all",
    summary="Mark all as read",
    operation_id="markAllNotificationsRead",
    responses={
        200: {"description": "Number of notifications marked as read"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def mark_all_read(app: AppDep, auth_token: AuthTokenDep) -> UnreadCount:
    return UnreadCount(count=await app.mark_all_notifications_read(auth_token))


@router.post(
    "/notifications/{notification_id}/read",
    summary="Mark as read",
    operation_id="markNotificationRead",
    status_code=204,
    responses={
        204: {"description": "Notification marked as read"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Notification not found"},
    },
)
async def mark_read(notification_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.mark_notification_read(auth_token, notification_id)
