"""Tests for the next-available-date search and its horizons."""

import pytest

from studio_booking.scheduling.slot_computer import SearchMode, SlotComputer
from studio_booking.schemas.availability_schema import CoarseSlots, DateOverride, OverrideType
from studio_booking.stores.booking_ledger import BookingLedger
from studio_booking.time_utils import add_days, is_weekend
from tests.conftest import ARTISTS, make_booking, make_template

# Saturday; scanning starts Sunday 2026-10-18
FROM_DATE = "2026-10-17"


class RecordingLedger(BookingLedger):
    """Ledger that remembers which dates were queried."""

    def __init__(self, store):
        super().__init__(store)
        self.dates: list[str] = []

    def get_bookings_for_date(self, date, include_cancelled=False):
        self.dates.append(date)
        return super().get_bookings_for_date(date, include_cancelled)


@pytest.fixture
def recording_ledger(store):
    return RecordingLedger(store)


@pytest.fixture
def scanner(availability, recording_ledger, slot_config):
    return SlotComputer(availability, recording_ledger, artists=ARTISTS, config=slot_config)


def _open(availability, date, artist_id="victoria"):
    availability.save_date_override(DateOverride(
        artist_id=artist_id, date=date, type=OverrideType.AVAILABLE,
        time_slots=CoarseSlots(morning=True),
    ))


class TestDailySearch:
    def test_starts_the_day_after(self, scanner, availability):
        # from_date itself is a Saturday with availability; it must be skipped
        availability.save_weekly_template("victoria", "saturday", make_template(("10:00", "14:00")))
        availability.save_weekly_template("victoria", "monday", make_template(("10:00", "14:00")))
        found = scanner.find_next_available_date(FROM_DATE)
        assert found is not None
        assert found.date == "2026-10-19"

    def test_returns_only_available_slots(self, scanner, availability, ledger):
        availability.save_weekly_template("victoria", "monday", make_template(("10:00", "18:00")))
        ledger.add_booking(make_booking(date="2026-10-19", time="10:00"))
        found = scanner.find_next_available_date(FROM_DATE)
        assert found.date == "2026-10-19"
        assert [s.time for s in found.time_slots] == ["14:00"]
        assert all(s.available for s in found.time_slots)

    def test_fully_booked_day_is_passed_over(self, scanner, availability, ledger):
        availability.save_weekly_template("victoria", "monday", make_template(("10:00", "14:00")))
        ledger.add_booking(make_booking(date="2026-10-19", time="10:00"))
        found = scanner.find_next_available_date(FROM_DATE)
        assert found.date == "2026-10-26"

    def test_exhausted_horizon_returns_none(self, scanner, recording_ledger):
        assert scanner.find_next_available_date(FROM_DATE) is None
        assert len(recording_ledger.dates) == 30
        assert recording_ledger.dates[0] == "2026-10-18"
        assert recording_ledger.dates[-1] == "2026-11-16"

    def test_last_day_of_horizon_found(self, scanner, availability):
        _open(availability, "2026-11-16")
        assert scanner.find_next_available_date(FROM_DATE).date == "2026-11-16"

    def test_day_after_horizon_not_scanned(self, scanner, availability):
        _open(availability, "2026-11-17")
        assert scanner.find_next_available_date(FROM_DATE) is None

    def test_blocked_days_are_skipped(self, scanner, availability):
        availability.save_weekly_template("victoria", "monday", make_template(("10:00", "14:00")))
        availability.save_date_override(DateOverride(
            artist_id="victoria", date="2026-10-19", type=OverrideType.BLOCKED,
        ))
        assert scanner.find_next_available_date(FROM_DATE).date == "2026-10-26"

    def test_defaults_to_tomorrow(self, scanner, recording_ledger, monkeypatch):
        monkeypatch.setattr(
            "studio_booking.scheduling.slot_computer.today", lambda: "2026-10-17"
        )
        scanner.find_next_available_date()
        assert recording_ledger.dates[0] == "2026-10-18"


class TestWeekendSearch:
    def test_only_weekend_days_scanned(self, scanner, recording_ledger):
        assert scanner.find_next_available_date(FROM_DATE, mode=SearchMode.WEEKEND) is None
        assert all(d in _weekend_dates() for d in recording_ledger.dates)
        assert recording_ledger.dates[0] == "2026-10-18"
        assert recording_ledger.dates[-1] == "2026-12-13"

    def test_weekday_availability_ignored(self, scanner, availability):
        availability.save_weekly_template("victoria", "monday", make_template(("10:00", "14:00")))
        assert scanner.find_next_available_date(FROM_DATE, mode="weekend") is None

    def test_finds_saturday(self, scanner, availability):
        availability.save_weekly_template("victoria", "saturday", make_template(("10:00", "14:00")))
        found = scanner.find_next_available_date(FROM_DATE, mode="weekend")
        assert found.date == "2026-10-24"

    def test_beyond_sixty_days_not_scanned(self, scanner, availability):
        _open(availability, "2026-12-19")
        assert scanner.find_next_available_date(FROM_DATE, mode="weekend") is None

    def test_within_sixty_days_found(self, scanner, availability):
        _open(availability, "2026-12-13")
        assert scanner.find_next_available_date(FROM_DATE, mode="weekend").date == "2026-12-13"

    def test_unknown_mode_rejected(self, scanner):
        with pytest.raises(ValueError):
            scanner.find_next_available_date(FROM_DATE, mode="monthly")


def _weekend_dates() -> set[str]:
    dates = (add_days("2026-10-18", i) for i in range(60))
    return {d for d in dates if is_weekend(d)}
