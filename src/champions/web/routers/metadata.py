"""Metadata endpoints: role visibility rules and build information."""

from fastapi import APIRouter

from champions.core.modules.resource.models import AccessLevel
from champions.core.modules.user.models import Role
from champions.web.deps import AppDep, AuthTokenDep
from champions.web.openapi import ErrorResponse

router = APIRouter(tags=["metadata"])


@router.get(
    "/metadata/access-levels",
    summary="Get resource access levels per role",
    description=(
        "Returns, for every role, the resource access levels it can view. "
        "The frontend uses it to offer only meaningful levels when uploading and to explain hidden folders."
    ),
    operation_id="getRoleAccessLevels",
    responses={
        200: {"description": "Mapping of roles to visible access levels"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_role_access_levels(app: AppDep, auth_token: AuthTokenDep) -> dict[Role, list[AccessLevel]]:
    return await app.get_role_access_levels(auth_token)


@router.get(
    "/metadata/version",
    summary="Get version information",
    description="Package version of the portal backend plus the git commit and build time baked into the image.",
    operation_id="getVersion",
    responses={
        200: {"description": "Version and build information"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def get_version(app: AppDep, auth_token: AuthTokenDep) -> dict[str, str]:
    return await app.get_version(auth_token)
