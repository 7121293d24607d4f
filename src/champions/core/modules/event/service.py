from typing import Any
from uuid import UUID, uuid4

import structlog
from pymongo import UpdateOne
from pymongo.asynchronous.database import AsyncDatabase

from champions.core.core import Service
from champions.core.modules.access.models import Actor
from champions.core.modules.event.models import EventPayload, EventUpdate, ScreeningEvent
from champions.errors import NotFoundError, ValidationError

logger = structlog.get_logger(__name__)


class EventService(Service):
    """Screening events calendar."""

    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        super().__init__(database)
        self._collection = database.get_collection("events")

    async def on_start(self) -> None:
        await self._collection.create_index([("date", -1)])

    async def list_events(self) -> list[ScreeningEvent]:
        """All events, latest date first."""
        cursor = self._collection.find({}).sort("date", -1)
        return await ScreeningEvent.list_cursor(cursor)

    async def get_event(self, event_id: UUID) -> ScreeningEvent:
        doc = await self._collection.find_one({"_id": event_id})
        if doc is None:
            raise NotFoundError("Event not found")
        return ScreeningEvent.model_validate(doc)

    async def create_event(self, actor: Actor, payload: EventPayload) -> ScreeningEvent:
        event = ScreeningEvent.model_validate(payload.model_dump())
        await self._collection.insert_one(event.to_mongo())
        logger.info("event_created", event_id=event.id, actor_id=actor.id)
        return event

    async def update_event(self, actor: Actor, event_id: UUID, update: EventUpdate) -> ScreeningEvent:
        changes = update.model_dump(exclude_none=True)
        if not changes:
            raise ValidationError("Missing event payload")
        result = await self._collection.update_one({"_id": event_id}, {"$set": changes})
        if result.matched_count == 0:
            raise NotFoundError("Event not found")
        logger.info("event_updated", event_id=event_id, actor_id=actor.id, fields=sorted(changes))
        return await self.get_event(event_id)

    async def delete_event(self, actor: Actor, event_id: UUID) -> None:
        result = await self._collection.delete_one({"_id": event_id})
        if result.deleted_count == 0:
            raise NotFoundError("Event not found")
        logger.info("event_deleted", event_id=event_id, actor_id=actor.id)

    async def seed_events(self, actor: Actor, events: list[tuple[UUID | None, EventPayload]]) -> int:
        """Upsert a batch of events in one write. Entries without an id get a new one."""
        if not events:
            raise ValidationError("Invalid events data.")
        operations = []
        for event_id, payload in events:
            event = ScreeningEvent.model_validate({**payload.model_dump(), "id": event_id or uuid4()})
            document = event.to_mongo()
            operations.append(UpdateOne({"_id": document.pop("_id")}, {"$set": document}, upsert=True))
        await self._collection.bulk_write(operations, ordered=False)
        logger.info("events_seeded", count=len(operations), actor_id=actor.id)
        return len(operations)
