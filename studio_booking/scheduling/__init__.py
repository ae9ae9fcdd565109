from studio_booking.scheduling.slot_computer import (
    BOOKED_REASON,
    SearchMode,
    SlotComputer,
    expand_time_range,
)

__all__ = ["SlotComputer", "SearchMode", "expand_time_range", "BOOKED_REASON"]
