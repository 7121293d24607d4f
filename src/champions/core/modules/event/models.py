from enum import StrEnum

from pydantic import Field

from champions.core.db import ApiModel, MongoModel


class EventType(StrEnum):
    BARBERSHOP = "Barbershop"
    COMMUNITY_CENTER = "Community Center"
    CHURCH = "Church"
    PHARMACY = "Pharmacy"


class Coordinates(ApiModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class ScreeningEvent(MongoModel):
    """Community screening event shown on the public calendar and locator."""

    name: str
    date: str  # ISO date, e.g. 2025-03-14; sorts lexicographically
    time: str  # Free-form display time, e.g. "10:00 AM - 2:00 PM"
    venue_name: str
    address: str
    zip: str
    type: EventType
    coordinates: Coordinates


class EventPayload(ApiModel):
    """Fields of an event as submitted by an organizer."""

    name: str = Field(..., min_length=1, max_length=200)
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    time: str = Field(..., min_length=1, max_length=100)
    venue_name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=300)
    zip: str = Field(..., pattern=r"^\d{5}(-\d{4})?$")
    type: EventType
    coordinates: Coordinates


class EventUpdate(ApiModel):
    """Partial event update. Fields left as None are not changed."""

    name: str | None = Field(None, min_length=1, max_length=200)
    date: str | None = Field(None, pattern=r"^\d{4}-\d{2}-\d{2}$")
    time: str | None = Field(None, min_length=1, max_length=100)
    venue_name: str | None = Field(None, min_length=1, max_length=200)
    address: str | None = Field(None, min_length=1, max_length=300)
    zip: str | None = Field(None, pattern=r"^\d{5}(-\d{4})?$")
    type: EventType | None = None
    coordinates: Coordinates | None = None
