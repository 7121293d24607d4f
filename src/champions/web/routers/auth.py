from fastapi import APIRouter, Response
from pydantic import Field

from champions.core.db import ApiModel
from champions.web.deps import AUTH_COOKIE, AppDep, AuthTokenDep
from champions.web.openapi import ErrorResponse

router = APIRouter(tags=["auth"])

SESSION_MAX_AGE = 30 * 24 * 60 * 60  # Matches the session TTL index


class LoginRequest(ApiModel):
    """Authentication request."""

    email: str = Field(..., description="Account email")
    password: str = Field(..., description="Account password")


class RegisterRequest(ApiModel):
    """Self-service account creation."""

    email: str = Field(..., min_length=3, max_length=254, description="Login email")
    password: str = Field(..., min_length=6, description="Password, at least 6 characters")
    display_name: str | None = Field(None, max_length=100, description="Name shown in the forum")


class LoginResponse(ApiModel):
    """Authentication response."""

    token: str = Field(..., description="Authentication token for subsequent requests")


def set_auth_cookie(response: Response, token: str) -> None:
    """Set cookie for browser-based clients."""
    response.set_cookie(
        key=AUTH_COOKIE,
        value=token,
        httponly=True,
        samesite="lax",
        secure=False,  # Set to True in production with HTTPS
        max_age=SESSION_MAX_AGE,
    )


@router.post(
    "/auth/login",
    summary="Authenticate user",
    description="Authenticate with email and password to receive an authentication token.",
    operation_id="login",
    responses={
        200: {"description": "Successfully authenticated"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
    },
)
async def login(login_data: LoginRequest, app: AppDep, response: Response) -> LoginResponse:
    token = await app.login(login_data.email, login_data.password)
    set_auth_cookie(response, token)
    return LoginResponse(token=token)


@router.post(
    "/auth/register",
    summary="Create account",
    description="Register a new volunteer account and sign it in.",
    operation_id="register",
    status_code=201,
    responses={
        201: {"description": "Account created"},
        400: {"model": ErrorResponse, "description": "Invalid email, weak password or email already taken"},
    },
)
async def register(register_data: RegisterRequest, app: AppDep, response: Response) -> LoginResponse:
    token = await app.register(register_data.email, register_data.password, register_data.display_name)
    set_auth_cookie(response, token)
    return LoginResponse(token=token)


@router.post(
    "/auth/logout",
    summary="End session",
    description="Invalidate the current authentication session.",
    operation_id="logout",
    status_code=204,
    responses={
        204: {"description": "Successfully logged out"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
    },
)
async def logout(app: AppDep, auth_token: AuthTokenDep, response: Response) -> None:
    await app.logout(auth_token)
    response.delete_cookie(AUTH_COOKIE)
