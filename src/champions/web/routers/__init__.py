from champions.web.routers.auth import router as auth_router
from champions.web.routers.events import router as events_router
from champions.web.routers.forum import router as forum_router
from champions.web.routers.metadata import router as metadata_router
from champions.web.routers.notifications import router as notifications_router
from champions.web.routers.profile import router as profile_router
from champions.web.routers.resources import router as resources_router
from champions.web.routers.screening import router as screening_router
from champions.web.routers.users import router as users_router

__all__ = [
    "auth_router",
    "events_router",
    "forum_router",
    "metadata_router",
    "notifications_router",
    "profile_router",
    "resources_router",
    "screening_router",
    "users_router",
]
