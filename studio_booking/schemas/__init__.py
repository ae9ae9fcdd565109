from studio_booking.schemas.availability_schema import (
    Artist,
    CoarseSlots,
    DateOverride,
    DayOfWeek,
    DayTemplate,
    OverrideType,
    TimeRange,
    WeeklyAvailability,
)
from studio_booking.schemas.booking_schema import Booking, BookingStatus
from studio_booking.schemas.settings_schema import BusinessSettings
from studio_booking.schemas.slot_schema import DayTimeSlots, NextAvailable, TimeSlot

__all__ = [
    "Artist", "CoarseSlots", "DateOverride", "DayOfWeek", "DayTemplate",
    "OverrideType", "TimeRange", "WeeklyAvailability",
    "Booking", "BookingStatus", "BusinessSettings",
    "DayTimeSlots", "NextAvailable", "TimeSlot",
]
