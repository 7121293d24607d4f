from __future__ import annotations

import importlib
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, cast
from urllib.parse import urlparse

from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase

from champions.config import Config

if TYPE_CHECKING:
    from champions.core.modules.access.service import AccessService
    from champions.core.modules.comment.service import CommentService
    from champions.core.modules.event.service import EventService
    from champions.core.modules.notification.service import NotificationService
    from champions.core.modules.post.service import PostService
    from champions.core.modules.resource.service import ResourceService
    from champions.core.modules.screening.service import ScreeningService
    from champions.core.modules.session.service import SessionService
    from champions.core.modules.storage.service import StorageService
    from champions.core.modules.user.service import UserService


class Service:
    """Base class for services with direct database access."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self.database = database
        self._core: Core | None = None

    async def on_start(self) -> None:
        """Initialize service on application startup."""

    async def on_stop(self) -> None:
        """Cleanup service on application shutdown."""

    @property
    def core(self) -> Core:
        """Get the core application context."""
        if self._core is None:
            raise RuntimeError("Core not set for service")
        return self._core

    def set_core(self, core: Core) -> None:
        """Set the core application context."""
        self._core = core


# (attribute_name, module_path, class_name). Start order follows this list:
# users must be cached before sessions resolve actors.
SERVICE_CONFIGS = [
    ("user", "champions.core.modules.user.service", "UserService"),
    ("session", "champions.core.modules.session.service", "SessionService"),
    ("access", "champions.core.modules.access.service", "AccessService"),
    ("storage", "champions.core.modules.storage.service", "StorageService"),
    ("notification", "champions.core.modules.notification.service", "NotificationService"),
    ("post", "champions.core.modules.post.service", "PostService"),
    ("comment", "champions.core.modules.comment.service", "CommentService"),
    ("resource", "champions.core.modules.resource.service", "ResourceService"),
    ("event", "champions.core.modules.event.service", "EventService"),
    ("screening", "champions.core.modules.screening.service", "ScreeningService"),
]


class Services:
    """Service registry that imports and initializes every configured service."""

    user: UserService
    session: SessionService
    access: AccessService
    storage: StorageService
    notification: NotificationService
    post: PostService
    comment: CommentService
    resource: ResourceService
    event: EventService
    screening: ScreeningService

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._services: list[Service] = []
        self._database = database

        for attr_name, module_path, class_name in SERVICE_CONFIGS:
            module = importlib.import_module(module_path)
            service_class = cast(type[Service], getattr(module, class_name))
            service_instance = service_class(database)
            setattr(self, attr_name, service_instance)
            self._services.append(service_instance)

    def set_core(self, core: Core) -> None:
        """Set core reference for all services."""
        for service in self._services:
            service.set_core(core)

    async def start_all(self) -> None:
        """Start all services in registration order."""
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        """Stop all services in reverse registration order."""
        for service in reversed(self._services):
            await service.on_stop()


class Core:
    """Container providing config, database, and all service instances."""

    config: Config
    mongo_client: AsyncMongoClient[dict[str, Any]]
    database: AsyncDatabase[dict[str, Any]]
    services: Services

    def __init__(self, config: Config) -> None:
        """Initialize core with config, MongoDB, and the service registry."""
        self.config = config
        self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard", tz_aware=True)
        self.database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
        self.services = Services(self.database)
        self.services.set_core(self)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close MongoDB connection on shutdown."""
        await self.services.stop_all()
        await self.mongo_client.aclose()
