"""Computed slot results. Never persisted."""

from typing import Optional

from pydantic import BaseModel, Field


class TimeSlot(BaseModel):
    """A single bookable window for one artist."""
    id: str
    time: str
    duration_minutes: int
    available: bool = True
    artist_id: str
    artist_name: str
    reason: Optional[str] = None
    appointment_id: Optional[str] = None


class DayTimeSlots(BaseModel):
    """All windows for a date, sorted by time of day."""
    date: str
    day_of_week: str
    time_slots: list[TimeSlot] = Field(default_factory=list)
    has_availability: bool = False
    skipped_artists: list[str] = Field(default_factory=list)

    def available_slots(self) -> list[TimeSlot]:
        return [slot for slot in self.time_slots if slot.available]


class NextAvailable(BaseModel):
    """First date with a free window, and only its free windows."""
    date: str
    time_slots: list[TimeSlot]
