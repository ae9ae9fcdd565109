"""
Business settings with an explicit, caller-owned cache.

The cache is handed to the service rather than living at module level,
so two tenants in one process never see each other's settings.

Usage:
    cache = TTLCache(ttl_seconds=300)
    service = BusinessSettingsService(store, cache)
    deposit = service.calculate_deposit_amount(600.0)
"""

import time
from typing import Any, Callable, Generic, Optional, TypeVar

from studio_booking.config import settings as app_settings
from studio_booking.logging_context import get_request_logger
from studio_booking.schemas.settings_schema import BusinessSettings
from studio_booking.stores.document_store import DocumentStore

logger = get_request_logger(__name__)

SETTINGS_COLLECTION = "businessSettings"
SETTINGS_DOC_ID = "default"

T = TypeVar("T")


class TTLCache(Generic[T]):
    """Holds one value until it expires or is invalidated."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._value: Optional[T] = None
        self._expires_at = 0.0

    def get(self) -> Optional[T]:
        if self._value is not None and self._clock() < self._expires_at:
            return self._value
        return None

    def put(self, value: T) -> None:
        self._value = value
        self._expires_at = self._clock() + self.ttl_seconds

    def invalidate(self) -> None:
        self._value = None
        self._expires_at = 0.0


class BusinessSettingsService:
    """Reads and updates the studio's single settings document."""

    def __init__(self, store: DocumentStore, cache: Optional[TTLCache[BusinessSettings]] = None) -> None:
        self.store = store
        if cache is None:
            cache = TTLCache(ttl_seconds=app_settings.store.settings_cache_ttl_seconds)
        self.cache = cache

    def get_settings(self) -> BusinessSettings:
        """Return stored settings, falling back to defaults when none exist."""
        cached = self.cache.get()
        if cached is not None:
            return cached

        doc = self.store.get(SETTINGS_COLLECTION, SETTINGS_DOC_ID)
        settings = BusinessSettings.model_validate(doc) if doc else BusinessSettings()
        self.cache.put(settings)
        return settings

    def update_settings(self, **changes: Any) -> BusinessSettings:
        """Apply field changes, persist, and invalidate the cache."""
        doc = self.store.get(SETTINGS_COLLECTION, SETTINGS_DOC_ID)
        current = BusinessSettings.model_validate(doc) if doc else BusinessSettings()
        updated = BusinessSettings.model_validate(
            {**current.model_dump(), **changes, "id": SETTINGS_DOC_ID}
        )
        self.store.set(SETTINGS_COLLECTION, SETTINGS_DOC_ID, updated.model_dump(mode="json"))
        self.cache.invalidate()
        logger.info("Business settings updated: %s", ", ".join(sorted(changes)))
        return updated

    def get_deposit_percentage(self) -> float:
        return self.get_settings().deposit_percentage

    def get_tax_rate(self) -> float:
        """Tax rate as a decimal fraction (7.75% -> 0.0775)."""
        return self.get_settings().tax_rate / 100

    def calculate_deposit_amount(self, service_price: float) -> float:
        """Deposit owed for a service price, rounded to cents."""
        if service_price < 0:
            raise ValueError(f"service_price must be >= 0, got {service_price}")
        return round(service_price * self.get_deposit_percentage() / 100, 2)
