from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from champions.app import App
from champions.config import Config
from champions.errors import UserError
from champions.utils import package_version
from champions.web.error_handlers import general_exception_handler, user_error_handler
from champions.web.openapi import set_custom_openapi
from champions.web.routers import (
    auth_router,
    events_router,
    forum_router,
    metadata_router,
    notifications_router,
    profile_router,
    resources_router,
    screening_router,
    users_router,
)


def create_fastapi_app(app_instance: App, config: Config) -> FastAPI:
    """Create and configure FastAPI application."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        app.state.app = app_instance
        app.state.config = config
        async with app_instance.lifespan():
            yield

    app = FastAPI(title="CHAMPIONS Portal API", lifespan=lifespan, openapi_tags=[])

    app.add_middleware(SessionMiddleware, secret_key=config.session_secret_key)

    # Frontend served from another origin
    if config.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    # Health check endpoint (at root level, not versioned)
    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy"}

    # API v1 routes
    for router in (
        auth_router,
        profile_router,
        users_router,
        forum_router,
        notifications_router,
        resources_router,
        events_router,
        screening_router,
        metadata_router,
    ):
        app.include_router(router, prefix="/api/v1")

    app.add_exception_handler(UserError, user_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    set_custom_openapi(app, package_version())

    return app
