"""Event and participation schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

EventCategory = Literal[
    "Community Rides",
    "Family & Kids",
    "She Rides",
    "Special Rides & Campaigns",
    "Activities",
    "Tracks",
]
EventType = Literal["Community Ride", "Special Ride", "Campaign", "Activity", "Track"]
EventStatus = Literal["upcoming", "ongoing", "completed", "cancelled"]


class EventCreate(BaseModel):
    """Request body for creating an event."""

    title: str = Field(..., min_length=1)
    description: str = Field(..., min_length=1)
    category: EventCategory
    event_type: EventType
    event_date: datetime
    event_time: str = Field(..., min_length=1)
    location: str = Field(..., min_length=1)
    distance: str | None = None
    surface: str | None = None
    pace: str | None = None
    amenities: list[str] = Field(default_factory=list)
    eligibility: str = Field(..., min_length=1)
    max_participants: int | None = Field(default=None, ge=1)
    status: EventStatus = "upcoming"
    is_free: bool = True
    track_id: str | None = None
    community_id: str | None = None


class EventUpdate(BaseModel):
    """Partial event update."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    category: EventCategory | None = None
    event_type: EventType | None = None
    event_date: datetime | None = None
    event_time: str | None = Field(default=None, min_length=1)
    location: str | None = Field(default=None, min_length=1)
    distance: str | None = None
    surface: str | None = None
    pace: str | None = None
    amenities: list[str] | None = None
    eligibility: str | None = Field(default=None, min_length=1)
    max_participants: int | None = Field(default=None, ge=1)
    status: EventStatus | None = None
    is_free: bool | None = None
    track_id: str | None = None
    community_id: str | None = None


class CancelRequest(BaseModel):
    """Cancellation of a participation."""

    reason: str | None = None


class ResultSubmission(BaseModel):
    """Distance and elapsed time of a completed ride."""

    distance: float | None = Field(default=None, ge=0)
    time: str = Field(..., min_length=1, description="HH:MM or HH:MM:SS")
