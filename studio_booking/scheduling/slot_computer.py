"""
Bookable slot computation for the studio's artists.

For a date, each artist's weekly template (or date override) is expanded
into fixed-length windows, windows already taken by bookings are marked
unavailable, and the result is sorted by time of day.

Slot length is a flat policy (240 minutes by default): appointments are
assumed uniform, so a range is cut into whole windows from its start and
any shorter remainder is dropped.

Usage:
    computer = SlotComputer(availability, ledger, artists)
    day = computer.compute_day_slots("2026-10-19")
    nxt = computer.find_next_available_date("2026-10-17", mode="weekend")
"""

from enum import Enum
from typing import Optional, Sequence

from pydantic import ValidationError

from studio_booking.config import SlotConfig, settings
from studio_booking.errors import PartialArtistFailure, StoreUnavailable, StudioError
from studio_booking.logging_context import get_request_logger
from studio_booking.schemas.availability_schema import (
    Artist,
    DateOverride,
    DayOfWeek,
    DayTemplate,
    OverrideType,
    TimeRange,
)
from studio_booking.schemas.booking_schema import Booking
from studio_booking.schemas.slot_schema import DayTimeSlots, NextAvailable, TimeSlot
from studio_booking.stores.availability_store import AvailabilityStore
from studio_booking.stores.booking_ledger import BookingLedger
from studio_booking.time_utils import (
    add_days,
    canonical_date,
    day_of_week,
    format_time,
    is_weekend,
    parse_time,
    today,
)

logger = get_request_logger(__name__)

BOOKED_REASON = "Booked"


class SearchMode(str, Enum):
    DAILY = "daily"
    WEEKEND = "weekend"


def _slot_id(artist_id: str, minutes: int, index: int) -> str:
    return f"{artist_id}_{format_time(minutes).replace(':', '')}_{index}"


def expand_time_range(
    time_range: TimeRange, artist: Artist, duration_minutes: int
) -> list[TimeSlot]:
    """Cut an active range into consecutive fixed-length windows.

    Returns ``floor(length / duration)`` windows; a range shorter than one
    window yields nothing.
    """
    if not time_range.is_active:
        return []

    slots = []
    start = time_range.start_minutes
    index = 0
    while start + duration_minutes <= time_range.end_minutes:
        slots.append(
            TimeSlot(
                id=_slot_id(artist.id, start, index),
                time=format_time(start),
                duration_minutes=duration_minutes,
                artist_id=artist.id,
                artist_name=artist.name,
            )
        )
        start += duration_minutes
        index += 1
    return slots


class SlotComputer:
    """Combines availability templates, overrides, and bookings into slots.

    Holds no per-request state; one instance can serve concurrent callers.
    """

    def __init__(
        self,
        availability: AvailabilityStore,
        ledger: BookingLedger,
        artists: Optional[Sequence[Artist]] = None,
        config: Optional[SlotConfig] = None,
    ) -> None:
        self.availability = availability
        self.ledger = ledger
        self.config = config or settings.slots
        if artists is None:
            artists = [Artist(id=aid, name=name) for aid, name in settings.studio.artists]
        self.artists = list(artists)

    # --- Per-artist window generation ---

    def _template_windows(self, template: Optional[DayTemplate], artist: Artist) -> list[TimeSlot]:
        if template is None or not template.is_enabled:
            return []

        windows: list[TimeSlot] = []
        seen_times: set[str] = set()
        for time_range in template.time_ranges:
            for slot in expand_time_range(time_range, artist, self.config.slot_duration_minutes):
                # Overlapping ranges can repeat a start time; first one wins
                if slot.time not in seen_times:
                    seen_times.add(slot.time)
                    windows.append(slot)
        return windows

    def _override_windows(self, override: DateOverride, artist: Artist) -> list[TimeSlot]:
        if override.type == OverrideType.BLOCKED:
            return []

        coarse = self.config.coarse_windows()
        windows = []
        for index, name in enumerate(override.time_slots.enabled()):
            start, end = (parse_time(t) for t in coarse[name])
            windows.append(
                TimeSlot(
                    id=_slot_id(artist.id, start, index),
                    time=format_time(start),
                    duration_minutes=end - start,
                    artist_id=artist.id,
                    artist_name=artist.name,
                )
            )
        return windows

    def _artist_windows(self, artist: Artist, date: str, day: DayOfWeek) -> list[TimeSlot]:
        try:
            override = self.availability.get_date_override(artist.id, date)
            if override is not None:
                logger.debug(
                    "Override for %s on %s: %s", artist.id, date, override.type.value
                )
                return self._override_windows(override, artist)
            template = self.availability.get_weekly_template(artist.id, day)
        except (StudioError, ValidationError) as exc:
            raise PartialArtistFailure(artist.id, exc) from exc
        return self._template_windows(template, artist)

    # --- Public operations ---

    def compute_day_slots(self, date: str) -> DayTimeSlots:
        """Compute every window for a date and whether each is free.

        An artist whose availability cannot be read is skipped and listed in
        ``skipped_artists``. Past dates are computed like any other date.

        Raises:
            InvalidDateError: If ``date`` is not ``YYYY-MM-DD``.
            StoreUnavailable: If the ledger cannot be read, or no artist's
                availability could be read.
        """
        date = canonical_date(date)
        day = DayOfWeek(day_of_week(date))

        bookings = self.ledger.get_bookings_for_date(date)
        booked: dict[tuple[str, str], Booking] = {}
        for booking in bookings:
            booked.setdefault((booking.artist_id, booking.time), booking)

        all_slots: list[TimeSlot] = []
        failures: list[PartialArtistFailure] = []
        for artist in self.artists:
            try:
                windows = self._artist_windows(artist, date, day)
            except PartialArtistFailure as failure:
                logger.warning("Skipping artist %s on %s: %s", artist.id, date, failure.cause)
                failures.append(failure)
                continue

            for slot in windows:
                booking = booked.get((slot.artist_id, slot.time))
                if booking is not None:
                    slot.available = False
                    slot.reason = BOOKED_REASON
                    slot.appointment_id = booking.id
            all_slots.extend(windows)

        if self.artists and len(failures) == len(self.artists):
            raise StoreUnavailable(
                f"Availability unreadable for every artist on {date}"
            ) from failures[0].cause

        # sort() is stable, so equal times keep artist order
        all_slots.sort(key=lambda s: parse_time(s.time))

        result = DayTimeSlots(
            date=date,
            day_of_week=day.value,
            time_slots=all_slots,
            has_availability=any(s.available for s in all_slots),
            skipped_artists=[f.artist_id for f in failures],
        )
        logger.debug(
            "Computed %d slots for %s (%d free)",
            len(all_slots), date, len(result.available_slots()),
        )
        return result

    def compute_week_slots(self, start_date: str) -> list[DayTimeSlots]:
        """Seven consecutive days from ``start_date``.

        A day whose store cannot be read comes back empty instead of
        failing the whole week.
        """
        start_date = canonical_date(start_date)
        week = []
        for offset in range(7):
            date = add_days(start_date, offset)
            try:
                week.append(self.compute_day_slots(date))
            except StoreUnavailable as exc:
                logger.error("Slots unavailable for %s: %s", date, exc)
                week.append(DayTimeSlots(date=date, day_of_week=day_of_week(date)))
        return week

    def is_time_slot_available(self, date: str, time: str, artist_id: str) -> bool:
        """Whether the artist has a free window starting at ``time`` on ``date``."""
        time = format_time(parse_time(time))
        day = self.compute_day_slots(date)
        return any(
            s.available for s in day.time_slots
            if s.artist_id == artist_id and s.time == time
        )

    def find_next_available_date(
        self,
        from_date: Optional[str] = None,
        mode: SearchMode | str = SearchMode.DAILY,
    ) -> Optional[NextAvailable]:
        """First date after ``from_date`` with a free window.

        Scanning starts the day after ``from_date`` (default: tomorrow).
        Daily mode checks ``daily_horizon_days`` days; weekend mode checks
        Saturdays and Sundays within ``weekend_horizon_days`` days. Returns
        None when the horizon holds nothing free.
        """
        mode = SearchMode(mode)
        start = add_days(from_date if from_date is not None else today(), 1)
        if mode == SearchMode.WEEKEND:
            horizon = self.config.weekend_horizon_days
        else:
            horizon = self.config.daily_horizon_days

        for offset in range(horizon):
            date = add_days(start, offset)
            if mode == SearchMode.WEEKEND and not is_weekend(date):
                continue
            day = self.compute_day_slots(date)
            if day.has_availability:
                logger.info("Next available date after %s: %s", start, date)
                return NextAvailable(date=date, time_slots=day.available_slots())

        logger.info("No availability within %d days of %s (%s)", horizon, start, mode.value)
        return None
