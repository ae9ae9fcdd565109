"""Booking data models."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from studio_booking.time_utils import canonical_date, normalize_time
from studio_booking.utils import normalize_email, normalize_phone


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def _booking_id() -> str:
    return f"BK-{uuid.uuid4().hex[:8].upper()}"


class Booking(BaseModel):
    """An appointment held in the booking ledger.

    Status changes are admin-driven and any status may follow any other.
    """
    id: str = Field(default_factory=_booking_id)
    client_name: str
    client_email: str = ""
    client_phone: str = ""
    artist_id: str
    service_name: str
    date: str
    time: str
    status: BookingStatus = BookingStatus.PENDING
    price: float = 0.0
    deposit_paid: bool = False
    ghl_contact_id: Optional[str] = None
    ghl_appointment_id: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("date")
    @classmethod
    def _valid_date(cls, value: str) -> str:
        return canonical_date(value)

    @field_validator("time")
    @classmethod
    def _canonical_time(cls, value: str) -> str:
        return normalize_time(value)

    @field_validator("client_phone")
    @classmethod
    def _clean_phone(cls, value: str) -> str:
        return normalize_phone(value) if value else ""

    @field_validator("client_email")
    @classmethod
    def _clean_email(cls, value: str) -> str:
        return normalize_email(value) if value else ""

    @field_validator("price")
    @classmethod
    def _non_negative_price(cls, value: float) -> float:
        if value < 0:
            raise ValueError(f"price must be >= 0, got {value}")
        return value

    @property
    def blocks_slot(self) -> bool:
        """Whether this booking consumes its time slot."""
        return self.status != BookingStatus.CANCELLED
