"""Shared test fixtures and helpers."""

from typing import Optional

import pytest

from studio_booking.config import SlotConfig
from studio_booking.scheduling.slot_computer import SlotComputer
from studio_booking.schemas.availability_schema import Artist, DayTemplate, TimeRange
from studio_booking.schemas.booking_schema import Booking, BookingStatus
from studio_booking.stores.availability_store import AvailabilityStore
from studio_booking.stores.booking_ledger import BookingLedger
from studio_booking.stores.document_store import InMemoryDocumentStore

# 2026-10-19 is a Monday, 2026-10-24 a Saturday
MONDAY = "2026-10-19"
SATURDAY = "2026-10-24"

ARTISTS = [Artist(id="victoria", name="Victoria"), Artist(id="admin", name="Admin")]


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def availability(store):
    return AvailabilityStore(store)


@pytest.fixture
def ledger(store):
    return BookingLedger(store)


@pytest.fixture
def slot_config():
    return SlotConfig(
        slot_duration_minutes=240,
        daily_horizon_days=30,
        weekend_horizon_days=60,
        morning_window="10:00-13:00",
        afternoon_window="13:00-16:00",
        evening_window="16:00-19:00",
    )


@pytest.fixture
def computer(availability, ledger, slot_config):
    return SlotComputer(availability, ledger, artists=ARTISTS, config=slot_config)


def make_template(
    *ranges: tuple[str, str],
    is_enabled: bool = True,
    inactive: Optional[set[int]] = None,
) -> DayTemplate:
    """Build a DayTemplate from (start, end) pairs; indexes in ``inactive`` are switched off."""
    inactive = inactive or set()
    return DayTemplate(
        is_enabled=is_enabled,
        time_ranges=[
            TimeRange(id=f"r{i}", start_time=start, end_time=end, is_active=i not in inactive)
            for i, (start, end) in enumerate(ranges)
        ],
    )


def make_booking(
    artist_id: str = "victoria",
    date: str = MONDAY,
    time: str = "10:00",
    status: BookingStatus = BookingStatus.CONFIRMED,
    booking_id: Optional[str] = None,
) -> Booking:
    """Helper to create a Booking with sensible defaults."""
    data = {
        "client_name": "Jane Doe",
        "client_email": "Jane@Example.com",
        "client_phone": "(555) 123-4567",
        "artist_id": artist_id,
        "service_name": "Microblading",
        "date": date,
        "time": time,
        "status": status,
        "price": 600.0,
    }
    if booking_id:
        data["id"] = booking_id
    return Booking(**data)
