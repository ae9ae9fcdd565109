"""
Centralized configuration with environment variable overrides.

Studio-specific values (artist roster, slot policy, horizons, storage
location) are configurable here. Nothing is hardcoded in store or
scheduling logic.
"""

import logging
import os
import re
from dataclasses import dataclass, field

from dotenv import load_dotenv

from studio_booking.logging_context import RequestIdFilter, get_request_logger

load_dotenv()

logger = get_request_logger(__name__)

_WINDOW_RE = re.compile(r"^\d{2}:\d{2}-\d{2}:\d{2}$")


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


def parse_artist_roster(raw: str) -> tuple[tuple[str, str], ...]:
    """Parse ``"id:Name,id2:Name 2"`` into ``(("id", "Name"), ...)``.

    A bare id without a name uses the capitalised id as display name.
    """
    roster = []
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        artist_id, _, name = entry.partition(":")
        artist_id = artist_id.strip()
        roster.append((artist_id, name.strip() or artist_id.capitalize()))
    return tuple(roster)


@dataclass(frozen=True)
class StudioConfig:
    """Studio identity and the artists whose calendars are computed."""

    name: str = os.getenv("STUDIO_NAME", "A Pretty Girl Matter")
    artists: tuple[tuple[str, str], ...] = parse_artist_roster(
        os.getenv("STUDIO_ARTISTS", "victoria:Victoria,admin:Admin")
    )


@dataclass(frozen=True)
class SlotConfig:
    """Slot sizing policy and next-available search horizons."""

    slot_duration_minutes: int = _safe_int("SLOT_DURATION_MINUTES", "240")
    daily_horizon_days: int = _safe_int("DAILY_HORIZON_DAYS", "30")
    weekend_horizon_days: int = _safe_int("WEEKEND_HORIZON_DAYS", "60")
    morning_window: str = os.getenv("MORNING_WINDOW", "10:00-13:00")
    afternoon_window: str = os.getenv("AFTERNOON_WINDOW", "13:00-16:00")
    evening_window: str = os.getenv("EVENING_WINDOW", "16:00-19:00")

    def coarse_windows(self) -> dict[str, tuple[str, str]]:
        """Return the coarse override windows as ``{name: (start, end)}``."""
        windows = {}
        for name, raw in (
            ("morning", self.morning_window),
            ("afternoon", self.afternoon_window),
            ("evening", self.evening_window),
        ):
            start, _, end = raw.partition("-")
            windows[name] = (start, end)
        return windows


@dataclass(frozen=True)
class StoreConfig:
    """Document store location and cache lifetimes."""

    data_path: str = os.getenv("STUDIO_DATA_PATH", "studio_data.json")
    settings_cache_ttl_seconds: int = _safe_int("SETTINGS_CACHE_TTL", "300")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    studio: StudioConfig = field(default_factory=StudioConfig)
    slots: SlotConfig = field(default_factory=SlotConfig)
    store: StoreConfig = field(default_factory=StoreConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    if not config.studio.artists:
        raise ValueError("STUDIO_ARTISTS must name at least one artist")
    if config.slots.slot_duration_minutes < 1:
        raise ValueError(
            f"SLOT_DURATION_MINUTES must be >= 1, got {config.slots.slot_duration_minutes}"
        )
    for name, value in [
        ("DAILY_HORIZON_DAYS", config.slots.daily_horizon_days),
        ("WEEKEND_HORIZON_DAYS", config.slots.weekend_horizon_days),
    ]:
        if value < 1:
            raise ValueError(f"{name} must be >= 1, got {value}")

    for name, raw in [
        ("MORNING_WINDOW", config.slots.morning_window),
        ("AFTERNOON_WINDOW", config.slots.afternoon_window),
        ("EVENING_WINDOW", config.slots.evening_window),
    ]:
        if not _WINDOW_RE.match(raw):
            raise ValueError(f"{name} must look like HH:MM-HH:MM, got {raw!r}")
        start, end = raw.split("-")
        if start >= end:
            raise ValueError(f"{name} must start before it ends, got {raw!r}")

    if config.store.settings_cache_ttl_seconds < 0:
        raise ValueError(
            "SETTINGS_CACHE_TTL must be >= 0, "
            f"got {config.store.settings_cache_ttl_seconds}"
        )


LOG_FORMAT = "%(asctime)s [%(request_id)s] [%(name)s] %(levelname)s: %(message)s"


def _install_request_id_filter() -> None:
    """Attach RequestIdFilter to every root handler.

    Records from loggers without the filter still reach these handlers,
    so the handler is where ``request_id`` must be guaranteed.
    """
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIdFilter) for f in handler.filters):
            handler.addFilter(RequestIdFilter())


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    _install_request_id_filter()
    logger.info("Configuration loaded for '%s'", config.studio.name)
    return config


# Singleton instance
settings = load_config()
