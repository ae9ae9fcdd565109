"""
Artist availability persistence: weekly templates and date overrides.

Each artist owns one ``artistAvailability`` document holding a
weekday -> template mapping. Overrides live in ``artistDateOverrides``
keyed ``{artist_id}_{date}``, which makes "at most one override per
artist and date" a property of the key: saving again replaces.
"""

from typing import Any, Optional

from studio_booking.errors import OverlappingTimeRanges
from studio_booking.logging_context import get_request_logger
from studio_booking.schemas.availability_schema import (
    DateOverride,
    DayOfWeek,
    DayTemplate,
    TimeRange,
    WeeklyAvailability,
)
from studio_booking.stores.document_store import DocumentStore
from studio_booking.time_utils import canonical_date

logger = get_request_logger(__name__)

AVAILABILITY_COLLECTION = "artistAvailability"
OVERRIDE_COLLECTION = "artistDateOverrides"

# Starting schedule written by initialize_artist_availability
DEFAULT_SCHEDULE: dict[DayOfWeek, Optional[tuple[str, str]]] = {
    DayOfWeek.MONDAY: ("09:00", "17:00"),
    DayOfWeek.TUESDAY: ("09:00", "17:00"),
    DayOfWeek.WEDNESDAY: ("09:00", "17:00"),
    DayOfWeek.THURSDAY: ("09:00", "17:00"),
    DayOfWeek.FRIDAY: ("09:00", "17:00"),
    DayOfWeek.SATURDAY: ("10:00", "16:00"),
    DayOfWeek.SUNDAY: None,
}


def override_key(artist_id: str, date: str) -> str:
    return f"{artist_id}_{canonical_date(date)}"


def _check_overlaps(day: DayOfWeek, template: DayTemplate) -> None:
    overlaps = template.overlapping_ranges()
    if overlaps:
        first, second = overlaps[0]
        raise OverlappingTimeRanges(
            f"{day.value}: {first.start_time}-{first.end_time} overlaps "
            f"{second.start_time}-{second.end_time}"
        )


class AvailabilityStore:
    """Reads and writes weekly templates and date overrides."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    # --- Weekly templates ---

    def get_weekly_availability(self, artist_id: str) -> Optional[WeeklyAvailability]:
        doc = self.store.get(AVAILABILITY_COLLECTION, artist_id)
        if doc is None:
            return None
        return WeeklyAvailability.model_validate(doc)

    def get_weekly_template(self, artist_id: str, day: DayOfWeek | str) -> Optional[DayTemplate]:
        """Return the template for one weekday, or None if never saved."""
        day = DayOfWeek(day)
        weekly = self.get_weekly_availability(artist_id)
        if weekly is None:
            return None
        return weekly.for_day(day)

    def save_weekly_availability(self, weekly: WeeklyAvailability) -> None:
        for day, template in weekly.days.items():
            _check_overlaps(day, template)
        weekly.touch()
        self.store.set(AVAILABILITY_COLLECTION, weekly.artist_id, weekly.model_dump(mode="json"))

    def save_weekly_template(
        self, artist_id: str, day: DayOfWeek | str, template: DayTemplate
    ) -> WeeklyAvailability:
        """Replace one weekday's template, creating the artist document if needed.

        Raises:
            OverlappingTimeRanges: If two active ranges in the template overlap.
        """
        day = DayOfWeek(day)
        _check_overlaps(day, template)
        weekly = self.get_weekly_availability(artist_id) or WeeklyAvailability(artist_id=artist_id)
        weekly.days[day] = template
        self.save_weekly_availability(weekly)
        logger.info(
            "Weekly template saved: %s %s (enabled=%s, %d ranges)",
            artist_id, day.value, template.is_enabled, len(template.time_ranges),
        )
        return weekly

    def set_day_enabled(self, artist_id: str, day: DayOfWeek | str, is_enabled: bool) -> DayTemplate:
        """Toggle a weekday on or off, keeping its ranges."""
        template = self.get_weekly_template(artist_id, day) or DayTemplate()
        template.is_enabled = is_enabled
        self.save_weekly_template(artist_id, day, template)
        return template

    def add_time_range(self, artist_id: str, day: DayOfWeek | str, time_range: TimeRange) -> DayTemplate:
        template = self.get_weekly_template(artist_id, day) or DayTemplate()
        template.time_ranges.append(time_range)
        self.save_weekly_template(artist_id, day, template)
        return template

    def update_time_range(
        self, artist_id: str, day: DayOfWeek | str, range_id: str, **changes: Any
    ) -> Optional[DayTemplate]:
        """Apply field changes to one range, keyed by id.

        Returns None if the day or range is unknown. The changed range is
        re-validated and the day re-checked for overlaps before saving.
        """
        template = self.get_weekly_template(artist_id, day)
        if template is None:
            return None
        for index, time_range in enumerate(template.time_ranges):
            if time_range.id == range_id:
                template.time_ranges[index] = TimeRange.model_validate(
                    {**time_range.model_dump(), **changes, "id": range_id}
                )
                break
        else:
            return None
        self.save_weekly_template(artist_id, day, template)
        return template

    def remove_time_range(self, artist_id: str, day: DayOfWeek | str, range_id: str) -> bool:
        """Remove a range by id. Returns False if the day or range is unknown."""
        template = self.get_weekly_template(artist_id, day)
        if template is None:
            return False
        remaining = [r for r in template.time_ranges if r.id != range_id]
        if len(remaining) == len(template.time_ranges):
            return False
        template.time_ranges = remaining
        self.save_weekly_template(artist_id, day, template)
        return True

    def update_services_offered(
        self, artist_id: str, day: DayOfWeek | str, services_offered: list[str]
    ) -> DayTemplate:
        """Replace the services offered on a weekday, keeping its ranges."""
        template = self.get_weekly_template(artist_id, day) or DayTemplate()
        template.services_offered = list(services_offered)
        self.save_weekly_template(artist_id, day, template)
        return template

    def initialize_artist_availability(self, artist_id: str) -> WeeklyAvailability:
        """Write the default studio schedule for a new artist."""
        weekly = WeeklyAvailability(artist_id=artist_id)
        for day, hours in DEFAULT_SCHEDULE.items():
            if hours is None:
                weekly.days[day] = DayTemplate(is_enabled=False)
            else:
                start, end = hours
                weekly.days[day] = DayTemplate(
                    is_enabled=True,
                    time_ranges=[TimeRange(id=f"{day.value}_default", start_time=start, end_time=end)],
                )
        self.save_weekly_availability(weekly)
        logger.info("Default availability initialized for %s", artist_id)
        return weekly

    # --- Date overrides ---

    def get_date_override(self, artist_id: str, date: str) -> Optional[DateOverride]:
        doc = self.store.get(OVERRIDE_COLLECTION, override_key(artist_id, date))
        if doc is None:
            return None
        return DateOverride.model_validate(doc)

    def save_date_override(self, override: DateOverride) -> None:
        """Create or replace the override for the artist and date."""
        self.store.set(
            OVERRIDE_COLLECTION,
            override_key(override.artist_id, override.date),
            override.model_dump(mode="json"),
        )
        logger.info(
            "Date override saved: %s %s (%s)",
            override.artist_id, override.date, override.type.value,
        )

    def delete_date_override(self, artist_id: str, date: str) -> bool:
        deleted = self.store.delete(OVERRIDE_COLLECTION, override_key(artist_id, date))
        if deleted:
            logger.info("Date override deleted: %s %s", artist_id, date)
        return deleted

    def list_date_overrides(self, artist_id: str) -> list[DateOverride]:
        """All overrides for an artist, oldest date first."""
        overrides = [
            DateOverride.model_validate(doc)
            for doc in self.store.query(OVERRIDE_COLLECTION, artist_id=artist_id)
        ]
        return sorted(overrides, key=lambda o: o.date)
