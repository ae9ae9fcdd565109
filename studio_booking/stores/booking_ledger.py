"""
Booking ledger persistence.

Date queries exclude cancelled bookings unless asked otherwise. The slot
computer relies on this and does not filter cancelled bookings itself.

A stored booking that no longer validates makes the read fail with
``StoreUnavailable``. Skipping it could show its slot as free.
"""

from typing import Any, Optional

from pydantic import ValidationError

from studio_booking.errors import InvalidDateError, StoreUnavailable
from studio_booking.logging_context import get_request_logger
from studio_booking.schemas.booking_schema import Booking, BookingStatus
from studio_booking.stores.document_store import DocumentStore
from studio_booking.time_utils import canonical_date

logger = get_request_logger(__name__)

BOOKING_COLLECTION = "appointments"


def _to_booking(doc_id: str, doc: dict[str, Any]) -> Booking:
    try:
        return Booking.model_validate(doc)
    except ValidationError as exc:
        logger.error("Unreadable booking document %s: %s", doc_id, exc)
        raise StoreUnavailable(
            f"Booking document {doc_id!r} is unreadable ({exc.error_count()} invalid field(s))"
        ) from exc


def _stored_date(doc: dict[str, Any]) -> Optional[str]:
    # Documents written by older clients may hold unpadded dates
    try:
        return canonical_date(str(doc.get("date", "")))
    except InvalidDateError:
        return None


class BookingLedger:
    """Stores bookings keyed by booking id."""

    def __init__(self, store: DocumentStore) -> None:
        self.store = store

    def add_booking(self, booking: Booking) -> Booking:
        self.store.set(BOOKING_COLLECTION, booking.id, booking.model_dump(mode="json"))
        logger.info(
            "Booking recorded: %s for %s with %s on %s at %s",
            booking.id, booking.client_name, booking.artist_id, booking.date, booking.time,
        )
        return booking

    def get_booking(self, booking_id: str) -> Optional[Booking]:
        doc = self.store.get(BOOKING_COLLECTION, booking_id)
        return _to_booking(booking_id, doc) if doc is not None else None

    def update_status(self, booking_id: str, status: BookingStatus | str) -> Optional[Booking]:
        """Set a booking's status. Returns None if the booking does not exist."""
        booking = self.get_booking(booking_id)
        if booking is None:
            return None
        booking.status = BookingStatus(status)
        self.store.set(BOOKING_COLLECTION, booking.id, booking.model_dump(mode="json"))
        logger.info("Booking %s status -> %s", booking_id, booking.status.value)
        return booking

    def delete_booking(self, booking_id: str) -> bool:
        deleted = self.store.delete(BOOKING_COLLECTION, booking_id)
        if deleted:
            logger.info("Booking deleted: %s", booking_id)
        return deleted

    def get_bookings_for_date(self, date: str, include_cancelled: bool = False) -> list[Booking]:
        """Bookings on a date, ordered by time then creation."""
        date = canonical_date(date)
        bookings = [
            _to_booking(doc_id, doc)
            for doc_id, doc in self.store.list_collection(BOOKING_COLLECTION).items()
            if _stored_date(doc) == date
        ]
        if not include_cancelled:
            bookings = [b for b in bookings if b.blocks_slot]
        return sorted(bookings, key=lambda b: (b.time, b.created_at))

    def get_bookings_for_artist_and_date(
        self, artist_id: str, date: str, include_cancelled: bool = False
    ) -> list[Booking]:
        return [
            b for b in self.get_bookings_for_date(date, include_cancelled=include_cancelled)
            if b.artist_id == artist_id
        ]
