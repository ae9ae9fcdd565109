"""Weekly availability templates, date overrides, and the artist roster."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from studio_booking.time_utils import canonical_date, normalize_time, parse_time


class DayOfWeek(str, Enum):
    SUNDAY = "sunday"
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"


class OverrideType(str, Enum):
    AVAILABLE = "available"
    BLOCKED = "blocked"


def _range_id() -> str:
    return f"range_{uuid.uuid4().hex[:9]}"


class Artist(BaseModel):
    """An artist whose calendar contributes slots."""
    id: str
    name: str


class TimeRange(BaseModel):
    """A wall-clock span within one day, e.g. 10:00-18:00."""
    id: str = Field(default_factory=_range_id)
    start_time: str
    end_time: str
    is_active: bool = True

    @field_validator("start_time", "end_time")
    @classmethod
    def _canonical_time(cls, value: str) -> str:
        return normalize_time(value)

    @model_validator(mode="after")
    def _start_before_end(self) -> "TimeRange":
        if parse_time(self.start_time) >= parse_time(self.end_time):
            raise ValueError(
                f"start_time must be before end_time ({self.start_time} >= {self.end_time})"
            )
        return self

    @property
    def start_minutes(self) -> int:
        return parse_time(self.start_time)

    @property
    def end_minutes(self) -> int:
        return parse_time(self.end_time)

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes

    def overlaps(self, other: "TimeRange") -> bool:
        return self.start_minutes < other.end_minutes and other.start_minutes < self.end_minutes


class DayTemplate(BaseModel):
    """Recurring availability for one weekday.

    Overlapping ranges are tolerated here so that older documents still
    load; the availability store rejects them on write.
    """
    is_enabled: bool = False
    time_ranges: list[TimeRange] = Field(default_factory=list)
    services_offered: list[str] = Field(default_factory=lambda: ["all"])

    def offers(self, service_id: str) -> bool:
        return "all" in self.services_offered or service_id in self.services_offered

    def overlapping_ranges(self) -> list[tuple[TimeRange, TimeRange]]:
        """Return every pair of active ranges that overlap."""
        active = [r for r in self.time_ranges if r.is_active]
        pairs = []
        for i, first in enumerate(active):
            for second in active[i + 1:]:
                if first.overlaps(second):
                    pairs.append((first, second))
        return pairs


class WeeklyAvailability(BaseModel):
    """Canonical per-artist document holding all seven weekday templates."""
    artist_id: str
    days: dict[DayOfWeek, DayTemplate] = Field(default_factory=dict)
    updated_at: Optional[datetime] = None

    def for_day(self, day: DayOfWeek) -> Optional[DayTemplate]:
        return self.days.get(day)

    def touch(self) -> None:
        self.updated_at = datetime.now(timezone.utc)


class CoarseSlots(BaseModel):
    """Morning / afternoon / evening flags of an ``available`` override."""
    morning: bool = False
    afternoon: bool = False
    evening: bool = False

    def enabled(self) -> list[str]:
        return [name for name in ("morning", "afternoon", "evening") if getattr(self, name)]


class DateOverride(BaseModel):
    """A date-specific exception to an artist's weekly template."""
    artist_id: str
    date: str
    type: OverrideType
    time_slots: CoarseSlots = Field(default_factory=CoarseSlots)
    note: Optional[str] = None

    @field_validator("date")
    @classmethod
    def _valid_date(cls, value: str) -> str:
        return canonical_date(value)
