"""
One-time normalisation of legacy documents into the canonical schema.

Older admin screens wrote one availability document per artist and
weekday (``victoria_monday``) with camelCase fields and ``9:00 AM`` style
times, and bookings with ``scheduledDate`` / ``scheduledTime``. This pass
folds those into the shapes the stores read, so no call site has to
sniff for several field names.

Safe to run repeatedly: canonical documents are left untouched.
"""

from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from studio_booking.errors import OverlappingTimeRanges
from studio_booking.logging_context import get_request_logger
from studio_booking.schemas.availability_schema import (
    DayOfWeek,
    DayTemplate,
    TimeRange,
    WeeklyAvailability,
)
from studio_booking.schemas.booking_schema import Booking
from studio_booking.stores.availability_store import AVAILABILITY_COLLECTION, AvailabilityStore
from studio_booking.stores.booking_ledger import BOOKING_COLLECTION
from studio_booking.stores.document_store import DocumentStore

logger = get_request_logger(__name__)

# Legacy booking field -> canonical field
_BOOKING_FIELDS = {
    "clientName": "client_name",
    "clientEmail": "client_email",
    "clientPhone": "client_phone",
    "artistId": "artist_id",
    "serviceName": "service_name",
    "scheduledDate": "date",
    "scheduledTime": "time",
    "totalAmount": "price",
    "ghlContactId": "ghl_contact_id",
    "ghlAppointmentId": "ghl_appointment_id",
}


@dataclass
class MigrationReport:
    """Outcome of a migration run."""

    artists_migrated: list[str] = field(default_factory=list)
    legacy_documents_removed: int = 0
    bookings_migrated: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _is_legacy_availability(doc: dict[str, Any]) -> bool:
    return "dayOfWeek" in doc and "days" not in doc


def _legacy_day_template(doc: dict[str, Any]) -> DayTemplate:
    return DayTemplate(
        is_enabled=bool(doc.get("isEnabled", False)),
        time_ranges=[
            TimeRange(
                id=r.get("id") or f"{doc['dayOfWeek']}_{i}",
                start_time=r["startTime"],
                end_time=r["endTime"],
                is_active=r.get("isActive", True),
            )
            for i, r in enumerate(doc.get("timeRanges", []))
        ],
        services_offered=doc.get("servicesOffered") or ["all"],
    )


def migrate_legacy_availability(store: DocumentStore) -> MigrationReport:
    """Fold per-weekday availability documents into per-artist documents.

    An artist whose legacy data cannot be converted keeps its legacy
    documents and is listed in ``report.errors``.
    """
    report = MigrationReport()
    availability = AvailabilityStore(store)

    grouped: dict[str, dict[str, dict[str, Any]]] = {}
    for doc_id, doc in store.list_collection(AVAILABILITY_COLLECTION).items():
        if _is_legacy_availability(doc):
            grouped.setdefault(doc.get("artistId", ""), {})[doc_id] = doc

    for artist_id, legacy_docs in sorted(grouped.items()):
        if not artist_id:
            report.errors.append(f"{len(legacy_docs)} legacy document(s) without artistId")
            continue
        try:
            weekly = availability.get_weekly_availability(artist_id) or WeeklyAvailability(
                artist_id=artist_id
            )
            for doc in legacy_docs.values():
                day = DayOfWeek(str(doc["dayOfWeek"]).lower())
                # Days already in canonical form win over legacy copies
                weekly.days.setdefault(day, _legacy_day_template(doc))
            availability.save_weekly_availability(weekly)
        except (KeyError, ValueError, ValidationError, OverlappingTimeRanges) as exc:
            logger.error("Cannot migrate availability for %s: %s", artist_id, exc)
            report.errors.append(f"{artist_id}: {exc}")
            continue

        for doc_id in legacy_docs:
            # Never remove the canonical document itself
            if doc_id != artist_id and store.delete(AVAILABILITY_COLLECTION, doc_id):
                report.legacy_documents_removed += 1
        report.artists_migrated.append(artist_id)
        logger.info("Migrated %d legacy day(s) for %s", len(legacy_docs), artist_id)

    return report


def migrate_legacy_bookings(store: DocumentStore, report: MigrationReport) -> MigrationReport:
    """Rename legacy camelCase booking fields in place."""
    for doc_id, doc in store.list_collection(BOOKING_COLLECTION).items():
        if "scheduledDate" not in doc:
            continue
        data = {_BOOKING_FIELDS.get(key, key): value for key, value in doc.items()}
        data["id"] = doc_id
        data["deposit_paid"] = doc.get("paymentStatus") in ("deposit_paid", "paid_in_full")
        if data.get("status") == "rescheduled":
            data["status"] = "confirmed"
        try:
            booking = Booking.model_validate(data)
        except ValidationError as exc:
            logger.error("Cannot migrate booking %s: %s", doc_id, exc)
            report.errors.append(f"booking {doc_id}: {exc.error_count()} invalid field(s)")
            continue
        store.set(BOOKING_COLLECTION, doc_id, booking.model_dump(mode="json"))
        report.bookings_migrated += 1
    return report


def run_migrations(store: DocumentStore) -> MigrationReport:
    """Run every legacy migration and return the combined report."""
    report = migrate_legacy_availability(store)
    migrate_legacy_bookings(store, report)
    logger.info(
        "Migration finished: %d artist(s), %d booking(s), %d error(s)",
        len(report.artists_migrated), report.bookings_migrated, len(report.errors),
    )
    return report
