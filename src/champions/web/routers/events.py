from uuid import UUID

from fastapi import APIRouter
from pydantic import Field

from champions.core.db import ApiModel
from champions.core.modules.event.models import EventPayload, EventUpdate, ScreeningEvent
from champions.web.deps import AppDep, AuthTokenDep
from champions.web.openapi import ErrorResponse

router = APIRouter(tags=["events"])


class SeedEvent(EventPayload):
    """Event with an optional fixed id, so seeding the same list twice updates in place."""

    id: UUID | None = Field(None, description="Existing event id to upsert")


class SeedResult(ApiModel):
    count: int = Field(..., description="Number of events written")


@router.get(
    "/events",
    summary="List screening events",
    description="Public calendar of screening events, latest date first.",
    operation_id="listEvents",
    responses={200: {"description": "List of events"}},
)
async def list_events(app: AppDep) -> list[ScreeningEvent]:
    return await app.list_events()


@router.post(
    "/events",
    summary="Create event",
    description="Add a screening event. Requires admin or moderator role.",
    operation_id="createEvent",
    status_code=201,
    responses={
        201: {"description": "Event created"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Moderator privileges required"},
    },
)
async def create_event(payload: EventPayload, app: AppDep, auth_token: AuthTokenDep) -> ScreeningEvent:
    return await app.create_event(auth_token, payload)


@router.patch(
    "/events/{event_id}",
    summary="Update event",
    description="Change some fields of an event. Requires admin or moderator role.",
    operation_id="updateEvent",
    responses={
        200: {"description": "Updated event"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Moderator privileges required"},
        404: {"model": ErrorResponse, "description": "Event not found"},
    },
)
async def update_event(event_id: UUID, update: EventUpdate, app: AppDep, auth_token: AuthTokenDep) -> ScreeningEvent:
    return await app.update_event(auth_token, event_id, update)


@router.delete(
    "/events/{event_id}",
    summary="Delete event",
    operation_id="deleteEvent",
    status_code=204,
    responses={
        204: {"description": "Event deleted"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Moderator privileges required"},
        404: {"model": ErrorResponse, "description": "Event not found"},
    },
)
async def delete_event(event_id: UUID, app: AppDep, auth_token: AuthTokenDep) -> None:
    await app.delete_event(auth_token, event_id)


@router.post(
    "/events/seed",
    summary="Seed events",
    description="Batch upsert of events by id. Admin only.",
    operation_id="seedEvents",
    responses={
        200: {"description": "Events written"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Admin privileges required"},
    },
)
async def seed_events(events: list[SeedEvent], app: AppDep, auth_token: AuthTokenDep) -> SeedResult:
    batch = [(event.id, EventPayload.model_validate(event.model_dump(exclude={"id"}))) for event in events]
    return SeedResult(count=await app.seed_events(auth_token, batch))
