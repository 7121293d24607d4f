"""Discussion forum endpoints: posts and threaded replies."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import Field

from champions.core.db import ApiModel
from champions.core.modules.comment.models import Comment, CommentNode
from champions.core.modules.post.models import Post
from champions.core.pagination import PaginationResult
from champions.web.deps import AppDep, AuthTokenDep
from champions.web.openapi import ErrorResponse

router: APIRouter = APIRouter(tags=["forum"])


class CreatePostRequest(ApiModel):
    """Request to start a discussion."""

    title: str = Field(..., min_length=5, max_length=200, description="Post title")
    content: str = Field(..., min_length=10, description="Post body")


class CreateCommentRequest(ApiModel):
    """Request to reply to a post or to another reply."""

    content: str = Field(..., min_length=2, description="Reply text")
    parent_id: UUID | None = Field(None, description="Reply being answered, null for a top-level reply")


@router.get(
    "/posts",
    summary="List posts",
    description="Get paginated forum posts, newest first.",
    operation_id="listPosts",
    responses={
        200: {"description": "Paginated list of posts"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def list_posts(
    app: AppDep,
    auth_token: AuthTokenDep,
    limit: Annotated[int, Query(ge=1, le=200, description="Maximum items to return")] = 50,
    offset: Annotated[int, Query(ge=0, description="Number of items to skip")] = 0,
) -> PaginationResult[Post]:
    return await app.list_posts(auth_token, limit, offset)


@router.post(
    "/posts",
    summary="Create post",
    description="Start a new discussion.",
    operation_id="createPost",
    status_code=201,
    responses={
        201: {"description": "Post created successfully"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def create_post(request: CreatePostRequest, app: AppDep, auth_token: AuthTokenDep) -> Post:
    return await app.create_post(auth_token, request.title, request.content)


@router.get(
    "/posts/{post_id}",
    summary="Get post",
    description="Get a single forum post.",
    operation_id="getPost",
    responses={
        200: {"description": "Post details"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Post not found"},
    },
)
async def get_post(post_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> Post:
    return await app.get_post(auth_token, post_id)


@router.delete(
    "/posts/{post_id}",
    summary="Delete post",
    description="Delete a post. Allowed for the author and for moderators.",
    operation_id="deletePost",
    status_code=204,
    responses={
        204: {"description": "Post deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not the author or a moderator"},
        404: {"model": ErrorResponse, "description": "Post not found"},
    },
)
async def delete_post(post_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.delete_post(auth_token, post_id)


@router.get(
    "/posts/{post_id}/comments",
    summary="Get reply thread",
    description="Get all replies of a post as a tree, oldest first at every level.",
    operation_id="getThread",
    responses={
        200: {"description": "Reply forest"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Post not found"},
    },
)
async def get_thread(post_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> list[CommentNode]:
    return await app.get_thread(auth_token, post_id)


@router.post(
    "/posts/{post_id}/comments",
    summary="Reply",
    description="Reply to a post, or to another reply when `parentId` is set.",
    operation_id="createComment",
    status_code=201,
    responses={
        201: {"description": "Reply created successfully"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "Post or parent reply not found"},
    },
)
async def create_comment(
    post_id: UUID, request: CreateCommentRequest, app: AppDep, auth_token: AuthTokenDep
) -> Comment:
    return await app.create_comment(auth_token, post_id, request.content, request.parent_id)


@router.delete(
    "/posts/{post_id}/comments/{comment_id}",
    summary="Delete reply",
    description="Delete a reply. Its own replies stay and are shown at the top level.",
    operation_id="deleteComment",
    status_code=204,
    responses={
        204: {"description": "Reply deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Not the author or a moderator"},
        404: {"model": ErrorResponse, "description": "Reply not found"},
    },
)
async def delete_comment(post_id: UUID, comment_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.delete_comment(auth_token, post_id, comment_id)
