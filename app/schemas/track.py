"""Track and community ride schemas."""

from datetime import date as Date
from typing import Literal

from pydantic import BaseModel, Field

TrackType = Literal["circuit", "road", "costal", "desert", "urban"]
TrackStatus = Literal["open", "limited", "closed"]
Facility = Literal[
    "water",
    "toilets",
    "parking",
    "lights",
    "cafes",
    "bikeRental",
    "firstAid",
    "changingRooms",
]
RideStatus = Literal["active", "left", "banned"]


class TrackCreate(BaseModel):
    """Request body for creating a track."""

    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    image: str | None = None
    city: str | None = None
    address: str | None = None
    zipcode: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    distance: float = Field(..., ge=0)
    elevation: str
    track_type: TrackType
    avgtime: str
    pace: str = Field(..., min_length=1)
    facilities: list[Facility] = Field(default_factory=list)
    status: TrackStatus = "open"
    difficulty: str | None = None
    safety_notes: str | None = None


class TrackUpdate(BaseModel):
    """Partial track update."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    image: str | None = None
    city: str | None = None
    address: str | None = None
    zipcode: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    distance: float | None = Field(default=None, ge=0)
    elevation: str | None = None
    track_type: TrackType | None = None
    avgtime: str | None = None
    pace: str | None = Field(default=None, min_length=1)
    facilities: list[Facility] | None = None
    status: TrackStatus | None = None
    difficulty: str | None = None
    safety_notes: str | None = None


class RideCreate(BaseModel):
    """Request body for creating a community ride."""

    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    image: str | None = None
    date: Date
    time: str = Field(..., min_length=1)
    address: str = Field(..., min_length=1)
    max_participants: int = Field(default=0, ge=0, description="0 means unlimited")
    min_age: int | None = Field(default=None, ge=0)
    max_age: int | None = Field(default=None, ge=0)
    status: RideStatus = "active"


class RideUpdate(BaseModel):
    """Partial community ride update."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    image: str | None = None
    date: Date | None = None
    time: str | None = Field(default=None, min_length=1)
    address: str | None = Field(default=None, min_length=1)
    max_participants: int | None = Field(default=None, ge=0)
    min_age: int | None = Field(default=None, ge=0)
    max_age: int | None = Field(default=None, ge=0)
    status: RideStatus | None = None
