"""Studio business settings."""

from typing import Optional

from pydantic import BaseModel, Field


class BusinessSettings(BaseModel):
    """Deposit, tax, and contact settings edited from the admin console."""
    deposit_percentage: float = Field(default=33.33, ge=0, le=100)
    tax_rate: float = Field(default=7.75, ge=0, le=100)
    cancellation_policy: str = "24 hours notice required"
    rebooking_fee: float = Field(default=50.0, ge=0)
    business_name: str = "A Pretty Girl Matter"
    address: str = ""
    phone: str = ""
    email: str = ""
    id: Optional[str] = None
