"""Tests for schema validation and wall-clock helpers."""

import pytest
from pydantic import ValidationError

from studio_booking.errors import InvalidDateError
from studio_booking.schemas.availability_schema import (
    CoarseSlots,
    DateOverride,
    DayTemplate,
    TimeRange,
    WeeklyAvailability,
)
from studio_booking.schemas.booking_schema import Booking
from studio_booking.time_utils import (
    add_days,
    canonical_date,
    day_index,
    day_of_week,
    format_time,
    is_weekend,
    normalize_time,
    parse_date,
    parse_time,
)
from tests.conftest import make_booking, make_template


class TestTimeHelpers:
    @pytest.mark.parametrize(
        "value,minutes",
        [
            ("00:00", 0),
            ("9:05", 545),
            ("14:30", 870),
            ("9:00 AM", 540),
            ("12:00 AM", 0),
            ("12:15 PM", 735),
            ("5:00 pm", 1020),
        ],
    )
    def test_parse_time(self, value, minutes):
        assert parse_time(value) == minutes

    @pytest.mark.parametrize("value", ["", "noon", "24:00", "13:00 PM", "10:60", "10"])
    def test_parse_time_rejects(self, value):
        with pytest.raises(ValueError, match="Invalid time"):
            parse_time(value)

    def test_format_time(self):
        assert format_time(0) == "00:00"
        assert format_time(870) == "14:30"
        with pytest.raises(ValueError):
            format_time(24 * 60)

    def test_normalize_time(self):
        assert normalize_time("4:00 PM") == "16:00"

    def test_day_of_week(self):
        assert day_of_week("2026-10-18") == "sunday"
        assert day_index("2026-10-18") == 0
        assert day_of_week("2026-10-24") == "saturday"
        assert day_index("2026-10-24") == 6
        # Leap day
        assert day_of_week("2028-02-29") == "tuesday"

    def test_weekend(self):
        assert is_weekend("2026-10-24") is True
        assert is_weekend("2026-10-25") is True
        assert is_weekend("2026-10-26") is False

    def test_add_days_crosses_month(self):
        assert add_days("2026-10-31", 1) == "2026-11-01"

    @pytest.mark.parametrize("value", ["2026-13-01", "19/10/2026", "", "2026-02-29"])
    def test_parse_date_rejects(self, value):
        with pytest.raises(InvalidDateError):
            parse_date(value)


class TestTimeRange:
    def test_legacy_times_normalized(self):
        rng = TimeRange(start_time="9:00 AM", end_time="5:00 PM")
        assert (rng.start_time, rng.end_time) == ("09:00", "17:00")
        assert rng.duration_minutes == 480
        assert rng.id.startswith("range_")

    def test_start_must_precede_end(self):
        with pytest.raises(ValidationError, match="start_time must be before end_time"):
            TimeRange(start_time="18:00", end_time="10:00")
        with pytest.raises(ValidationError):
            TimeRange(start_time="10:00", end_time="10:00")

    def test_overlaps(self):
        a = TimeRange(start_time="10:00", end_time="14:00")
        assert a.overlaps(TimeRange(start_time="13:00", end_time="15:00"))
        assert not a.overlaps(TimeRange(start_time="14:00", end_time="15:00"))


class TestDayTemplate:
    def test_defaults(self):
        template = DayTemplate()
        assert template.is_enabled is False
        assert template.offers("brows")

    def test_specific_services(self):
        template = DayTemplate(services_offered=["brows", "lips"])
        assert template.offers("lips")
        assert not template.offers("eyeliner")

    def test_overlapping_pairs(self):
        template = make_template(("10:00", "14:00"), ("12:00", "16:00"), ("16:00", "18:00"))
        pairs = template.overlapping_ranges()
        assert [(a.id, b.id) for a, b in pairs] == [("r0", "r1")]

    def test_weekly_document_roundtrip_keys(self):
        weekly = WeeklyAvailability(artist_id="victoria", days={"monday": make_template(("10:00", "14:00"))})
        dumped = weekly.model_dump(mode="json")
        assert list(dumped["days"]) == ["monday"]


class TestDateOverride:
    def test_invalid_date(self):
        with pytest.raises(ValidationError):
            DateOverride(artist_id="victoria", date="2026-10-32", type="blocked")

    def test_invalid_type(self):
        with pytest.raises(ValidationError):
            DateOverride(artist_id="victoria", date="2026-10-19", type="closed")

    def test_date_zero_padded(self):
        override = DateOverride(artist_id="victoria", date="2026-9-7", type="blocked")
        assert override.date == "2026-09-07"

    def test_coarse_slot_order(self):
        slots = CoarseSlots(evening=True, morning=True)
        assert slots.enabled() == ["morning", "evening"]


class TestBooking:
    def test_normalization(self):
        booking = make_booking(time="2:00 PM")
        assert booking.time == "14:00"
        assert booking.client_phone == "5551234567"
        assert booking.id.startswith("BK-")
        assert booking.blocks_slot is True

    def test_cancelled_does_not_block(self):
        assert make_booking(status="cancelled").blocks_slot is False

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError, match="price"):
            Booking.model_validate({**make_booking().model_dump(), "price": -1})

    def test_unknown_status_rejected(self):
        with pytest.raises(ValidationError):
            make_booking(status="no_show")

    @pytest.mark.parametrize("value", ["2026-9-7", "2026-09-7", " 2026-09-07 "])
    def test_date_zero_padded(self, value):
        assert make_booking(date=value).date == "2026-09-07"
        assert canonical_date(value) == "2026-09-07"
