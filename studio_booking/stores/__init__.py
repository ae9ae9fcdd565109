from studio_booking.stores.availability_store import AvailabilityStore
from studio_booking.stores.booking_ledger import BookingLedger
from studio_booking.stores.document_store import (
    DocumentStore,
    InMemoryDocumentStore,
    JsonFileDocumentStore,
)

__all__ = [
    "AvailabilityStore",
    "BookingLedger",
    "DocumentStore",
    "InMemoryDocumentStore",
    "JsonFileDocumentStore",
]
